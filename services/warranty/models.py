"""
Warranty data model.

Records are plain dataclasses converted to and from store documents.
Dates are stored as ISO strings so both store backends hold identical
documents.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from services.warranty.expiry import EXPIRING_SOON_DAYS, CoverageStatus, coverage_status


class WarrantyType(str, Enum):
    ISSUED = "issued"
    MANUAL = "manual"


class RecordStatus(str, Enum):
    """Stored registration status. Coverage decisions never read it."""

    ACTIVE = "active"
    SELF_DECLARED = "self_declared"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    UNVERIFIED = "unverified"


class HistoryAction(str, Enum):
    ISSUED = "issued"
    CLAIMED = "claimed"
    RELEASED = "released"
    DECLARED = "declared"


@dataclass(frozen=True)
class Principal:
    """Identity supplied by the external identity provider."""

    uid: str
    email: str | None = None
    display_name: str | None = None


@dataclass
class HistoryEvent:
    """One entry in a record's append-only lifecycle history."""

    action: HistoryAction
    date: datetime
    user: str | None = None

    def to_document(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "date": self.date.isoformat(),
            "user": self.user,
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> HistoryEvent:
        return cls(
            action=HistoryAction(data["action"]),
            date=datetime.fromisoformat(data["date"]),
            user=data.get("user"),
        )


@dataclass
class WarrantyRecord:
    """A product's coverage terms and current ownership."""

    id: str
    code: str | None
    product_model: str
    brand: str
    serial_number: str
    purchase_date: date
    expiry_date: date
    duration_months: int
    type: WarrantyType
    status: RecordStatus
    verification_status: VerificationStatus
    seller_id: str | None = None
    seller_email: str | None = None
    seller_name: str | None = None
    buyer_id: str | None = None
    buyer_email: str | None = None
    customer_name: str = ""
    customer_phone: str = ""
    notes: str = ""
    previous_owner: str | None = None
    claimed_at: datetime | None = None
    transferred_at: datetime | None = None
    created_at: datetime | None = None
    history: list[HistoryEvent] = field(default_factory=list)

    @property
    def is_claimed(self) -> bool:
        return self.buyer_id is not None

    def coverage_status(
        self, today: date, window_days: int = EXPIRING_SOON_DAYS
    ) -> CoverageStatus:
        return coverage_status(self.expiry_date, today, window_days)

    def to_document(self) -> dict[str, Any]:
        """Convert to a store document."""
        return {
            "id": self.id,
            "code": self.code,
            "product_model": self.product_model,
            "brand": self.brand,
            "serial_number": self.serial_number,
            "purchase_date": self.purchase_date.isoformat(),
            "expiry_date": self.expiry_date.isoformat(),
            "duration_months": self.duration_months,
            "type": self.type.value,
            "status": self.status.value,
            "verification_status": self.verification_status.value,
            "seller_id": self.seller_id,
            "seller_email": self.seller_email,
            "seller_name": self.seller_name,
            "buyer_id": self.buyer_id,
            "buyer_email": self.buyer_email,
            "customer_name": self.customer_name,
            "customer_phone": self.customer_phone,
            "notes": self.notes,
            "previous_owner": self.previous_owner,
            "claimed_at": _iso(self.claimed_at),
            "transferred_at": _iso(self.transferred_at),
            "created_at": _iso(self.created_at),
            "history": [event.to_document() for event in self.history],
        }

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> WarrantyRecord:
        """Build a record from a store document."""
        return cls(
            id=data["id"],
            code=data.get("code"),
            product_model=data.get("product_model", ""),
            brand=data.get("brand", ""),
            serial_number=data.get("serial_number", "N/A"),
            purchase_date=date.fromisoformat(data["purchase_date"]),
            expiry_date=date.fromisoformat(data["expiry_date"]),
            duration_months=data.get("duration_months", 0),
            type=WarrantyType(data.get("type", WarrantyType.ISSUED.value)),
            status=RecordStatus(data.get("status", RecordStatus.ACTIVE.value)),
            verification_status=VerificationStatus(
                data.get("verification_status", VerificationStatus.VERIFIED.value)
            ),
            seller_id=data.get("seller_id"),
            seller_email=data.get("seller_email"),
            seller_name=data.get("seller_name"),
            buyer_id=data.get("buyer_id"),
            buyer_email=data.get("buyer_email"),
            customer_name=data.get("customer_name", ""),
            customer_phone=data.get("customer_phone", ""),
            notes=data.get("notes", ""),
            previous_owner=data.get("previous_owner"),
            claimed_at=_parse_datetime(data.get("claimed_at")),
            transferred_at=_parse_datetime(data.get("transferred_at")),
            created_at=_parse_datetime(data.get("created_at")),
            history=[HistoryEvent.from_document(e) for e in data.get("history", [])],
        )


@dataclass
class IssueRequest:
    """Seller input for a new warranty."""

    product_model: str
    serial_number: str
    purchase_date: date
    duration_months: int | None = None
    custom_expiry_date: date | None = None
    brand: str = ""
    customer_name: str = ""
    customer_phone: str = ""


@dataclass
class ManualWarrantyRequest:
    """Buyer input for a self-declared warranty."""

    product_model: str
    purchase_date: date
    duration_months: int | None = None
    custom_expiry_date: date | None = None
    brand: str = ""
    serial_number: str = ""
    seller_name: str = ""
    notes: str = ""


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
