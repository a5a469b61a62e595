"""
Seller profiles.

Onboarding creates the profile, settings updates edit it, and buyers see
a public view that leaves out registration numbers.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

from services.warranty.errors import InvalidWarrantyInput, SellerNotFound
from services.warranty.models import Principal
from services.warranty.store import DocumentStore
from shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BRAND_COLOR = "#4F46E5"
SOCIAL_NETWORKS = ("facebook", "instagram", "twitter", "linkedin")
PRIVATE_FIELDS = frozenset({"trade_license", "tax_id"})


@dataclass
class SellerProfile:
    """A seller's business profile."""

    seller_id: str
    business_name: str
    business_type: str = "retail"
    description: str = ""
    trade_license: str = ""
    tax_id: str = ""
    address: str = ""
    support_email: str = ""
    support_phone: str = ""
    website: str = ""
    brand_color: str = DEFAULT_BRAND_COLOR
    socials: dict[str, str] = field(default_factory=lambda: dict.fromkeys(SOCIAL_NETWORKS, ""))
    opening_hours: str = ""
    onboarding_completed: bool = False
    updated_at: datetime | None = None

    def public_view(self) -> dict[str, Any]:
        data = asdict(self)
        for key in PRIVATE_FIELDS:
            data.pop(key)
        return data

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> SellerProfile:
        updated_at = data.get("updated_at")
        socials = dict.fromkeys(SOCIAL_NETWORKS, "")
        socials.update(data.get("socials") or {})
        return cls(
            seller_id=data["seller_id"],
            business_name=data.get("business_name", ""),
            business_type=data.get("business_type", "retail"),
            description=data.get("description", ""),
            trade_license=data.get("trade_license", ""),
            tax_id=data.get("tax_id", ""),
            address=data.get("address", ""),
            support_email=data.get("support_email", ""),
            support_phone=data.get("support_phone", ""),
            website=data.get("website", ""),
            brand_color=data.get("brand_color", DEFAULT_BRAND_COLOR),
            socials=socials,
            opening_hours=data.get("opening_hours", ""),
            onboarding_completed=data.get("onboarding_completed", False),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )


_EDITABLE_FIELDS = frozenset(
    {
        "business_name",
        "business_type",
        "description",
        "trade_license",
        "tax_id",
        "address",
        "support_email",
        "support_phone",
        "website",
        "brand_color",
        "socials",
        "opening_hours",
    }
)


class SellerDirectory:
    """Seller onboarding, settings and profile lookup."""

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.clock = clock or (lambda: datetime.now(UTC))

    async def complete_onboarding(
        self,
        seller: Principal,
        fields: dict[str, Any],
    ) -> SellerProfile:
        """
        Create or overwrite the seller's profile and mark onboarding done.

        Raises:
            InvalidWarrantyInput: Missing business name or unknown fields.
        """
        changes = self._clean(fields)
        if not str(changes.get("business_name", "")).strip():
            raise InvalidWarrantyInput("Business name is required")

        changes["onboarding_completed"] = True
        changes["updated_at"] = self.clock().isoformat()
        document = await self.store.upsert_seller(seller.uid, changes)

        logger.info("seller_onboarded", seller_id=seller.uid)
        return SellerProfile.from_document(document)

    async def update_settings(
        self,
        seller: Principal,
        fields: dict[str, Any],
    ) -> SellerProfile:
        """
        Apply a partial settings update.

        Raises:
            InvalidWarrantyInput: Blank business name or unknown fields.
            SellerNotFound: The seller has not onboarded yet.
        """
        changes = self._clean(fields)
        if "business_name" in changes and not str(changes["business_name"]).strip():
            raise InvalidWarrantyInput("Business name cannot be blank")

        changes["updated_at"] = self.clock().isoformat()
        document = await self.store.update_seller(seller.uid, changes)
        if document is None:
            raise SellerNotFound(f"Seller {seller.uid} has no profile yet")

        logger.info("seller_settings_updated", seller_id=seller.uid, fields=sorted(changes))
        return SellerProfile.from_document(document)

    async def get_profile(self, seller_id: str) -> SellerProfile:
        document = await self.store.get_seller(seller_id)
        if document is None:
            raise SellerNotFound(f"Seller {seller_id} not found")
        return SellerProfile.from_document(document)

    @staticmethod
    def _clean(fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise InvalidWarrantyInput(f"Unknown profile fields: {', '.join(sorted(unknown))}")

        changes = dict(fields)
        if "socials" in changes:
            socials = changes["socials"] or {}
            extra = set(socials) - set(SOCIAL_NETWORKS)
            if extra:
                raise InvalidWarrantyInput(f"Unknown social networks: {', '.join(sorted(extra))}")
            changes["socials"] = {k: socials.get(k, "") for k in SOCIAL_NETWORKS}
        return changes
