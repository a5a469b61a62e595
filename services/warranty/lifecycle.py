"""
Warranty Lifecycle.

Issue, claim, release and self-declare transitions over a document store.

States:
- Unclaimed: issued by a seller, no buyer attached
- Owned: a buyer claimed the code
- Released: the owner gave the record up; the same code is claimable again
- SelfDeclared: created directly by a buyer, no code, unverified

Claim and release are single conditional updates on ``buyer_id`` so two
concurrent claims on one code cannot both succeed.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime

from services.warranty.codes import generate_unique_code, normalize_code
from services.warranty.errors import (
    AlreadyClaimed,
    CodeGenerationExhausted,
    DuplicateCode,
    InvalidWarrantyInput,
    NotWarrantyOwner,
    WarrantyNotFound,
)
from services.warranty.expiry import EXPIRING_SOON_DAYS, CoverageStatus, compute_expiry
from services.warranty.models import (
    HistoryAction,
    HistoryEvent,
    IssueRequest,
    ManualWarrantyRequest,
    Principal,
    RecordStatus,
    VerificationStatus,
    WarrantyRecord,
    WarrantyType,
)
from services.warranty.store import DocumentStore
from shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_SELLER_NAME = "Official Store"
DEFAULT_SHOP_NAME = "Unknown Shop"
DEFAULT_BUYER_NAME = "Me"
NO_SERIAL = "N/A"


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class ReleaseResult:
    """Outcome of a release: the code to hand to the next owner."""

    transfer_code: str
    record: WarrantyRecord


@dataclass
class StatusCounts:
    """Records per derived coverage status."""

    total: int = 0
    active: int = 0
    expiring_soon: int = 0
    expired: int = 0

    def add(self, status: CoverageStatus) -> None:
        self.total += 1
        if status == CoverageStatus.ACTIVE:
            self.active += 1
        elif status == CoverageStatus.EXPIRING_SOON:
            self.expiring_soon += 1
        else:
            self.expired += 1


@dataclass
class WalletSummary:
    """A buyer's warranties with derived statuses."""

    records: list[WarrantyRecord]
    statuses: dict[str, CoverageStatus]
    counts: StatusCounts


@dataclass
class SellerDashboard:
    """Aggregate view of a seller's issued warranties."""

    counts: StatusCounts
    claimed: int
    recent: list[WarrantyRecord] = field(default_factory=list)


class WarrantyLifecycle:
    """
    Warranty lifecycle state machine.

    Features:
    - Seller issue with collision-checked codes and computed expiry
    - Buyer claim by code with an atomic single-owner guarantee
    - Owner release that hands the same code on as a transfer token
    - Buyer self-declared records for warranties the platform did not issue
    - Buyer wallet and seller dashboard views with derived status
    """

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] | None = None,
        code_max_attempts: int = 5,
        expiring_soon_days: int = EXPIRING_SOON_DAYS,
    ) -> None:
        self.store = store
        self.clock = clock or _utcnow
        self.code_max_attempts = code_max_attempts
        self.expiring_soon_days = expiring_soon_days

    def today(self) -> date:
        return self.clock().date()

    def status_of(self, record: WarrantyRecord) -> CoverageStatus:
        return record.coverage_status(self.today(), self.expiring_soon_days)

    async def issue(self, seller: Principal, request: IssueRequest) -> WarrantyRecord:
        """
        Issue a new warranty in the Unclaimed state.

        Args:
            seller: Acting seller identity.
            request: Product, customer and coverage details.

        Returns:
            The stored record, carrying a fresh unique code.

        Raises:
            InvalidWarrantyInput: Missing product model or serial number,
                or invalid coverage terms.
            CodeGenerationExhausted: Every candidate code collided.
        """
        product_model = _required(request.product_model, "Product model")
        serial_number = _required(request.serial_number, "Serial number")
        terms = compute_expiry(
            request.purchase_date,
            duration_months=request.duration_months,
            custom_expiry_date=request.custom_expiry_date,
        )
        now = self.clock()

        # One existence check per generated candidate
        checks = 0

        async def counted_exists(candidate: str) -> bool:
            nonlocal checks
            checks += 1
            return await self.store.code_exists(candidate)

        while checks < self.code_max_attempts:
            code = await generate_unique_code(
                counted_exists, max_attempts=self.code_max_attempts - checks
            )
            record = WarrantyRecord(
                id=uuid.uuid4().hex,
                code=code,
                product_model=product_model,
                brand=request.brand.strip(),
                serial_number=serial_number,
                purchase_date=request.purchase_date,
                expiry_date=terms.expiry_date,
                duration_months=terms.duration_months,
                type=WarrantyType.ISSUED,
                status=RecordStatus.ACTIVE,
                verification_status=VerificationStatus.VERIFIED,
                seller_id=seller.uid,
                seller_email=seller.email,
                seller_name=seller.display_name or DEFAULT_SELLER_NAME,
                customer_name=request.customer_name.strip(),
                customer_phone=request.customer_phone.strip(),
                created_at=now,
                history=[HistoryEvent(HistoryAction.ISSUED, now, seller.email)],
            )
            try:
                await self.store.insert_warranty(record.to_document())
            except DuplicateCode:
                # Lost a race with another issue between check and insert
                logger.warning("warranty_code_insert_conflict", code=code, attempt=checks)
                continue

            logger.info(
                "warranty_issued",
                record_id=record.id,
                code=code,
                seller_id=seller.uid,
                expiry_date=record.expiry_date.isoformat(),
            )
            return record

        raise CodeGenerationExhausted(
            f"Could not store a unique warranty code after {self.code_max_attempts} attempts"
        )

    async def claim(
        self,
        buyer: Principal,
        code: str,
        purchase_date: date | None = None,
    ) -> WarrantyRecord:
        """
        Attach ``buyer`` as owner of the unclaimed record holding ``code``.

        Args:
            buyer: Claiming buyer identity.
            code: Warranty code as typed by the buyer.
            purchase_date: Optional invoice date that must match the record.

        Raises:
            InvalidWarrantyInput: Empty code or mismatched purchase date.
            WarrantyNotFound: No record has this code.
            AlreadyClaimed: Another buyer owns the record.
        """
        code = normalize_code(code)
        if not code:
            raise InvalidWarrantyInput("Warranty code is required")

        if purchase_date is not None:
            existing = await self._find_by_code(code)
            if existing.purchase_date != purchase_date:
                logger.info("warranty_claim_date_mismatch", code=code, buyer_id=buyer.uid)
                raise InvalidWarrantyInput("Purchase date does not match this warranty")

        now = self.clock()
        document = await self.store.compare_and_set(
            match={"code": code, "buyer_id": None},
            changes={
                "buyer_id": buyer.uid,
                "buyer_email": buyer.email,
                "claimed_at": now.isoformat(),
            },
            history_event=HistoryEvent(HistoryAction.CLAIMED, now, buyer.email).to_document(),
        )

        if document is None:
            await self._find_by_code(code)
            logger.info("warranty_claim_conflict", code=code, buyer_id=buyer.uid)
            raise AlreadyClaimed("This warranty has already been claimed by another user.")

        record = WarrantyRecord.from_document(document)
        logger.info("warranty_claimed", record_id=record.id, code=code, buyer_id=buyer.uid)
        return record

    async def release(
        self,
        owner: Principal,
        record_id: str,
        confirm: bool = False,
    ) -> ReleaseResult:
        """
        Release an owned warranty so a new owner can claim it.

        The record keeps its code, which is returned as the transfer code.

        Raises:
            InvalidWarrantyInput: Not confirmed, or the record has no code.
            WarrantyNotFound: Unknown record id.
            NotWarrantyOwner: ``owner`` does not hold the record.
        """
        if not confirm:
            raise InvalidWarrantyInput(
                "Releasing a warranty removes it from your account and must be confirmed"
            )

        current = await self.get_owned(owner, record_id)
        if current.code is None:
            raise InvalidWarrantyInput("Self-declared warranties have no code to transfer")

        now = self.clock()
        document = await self.store.compare_and_set(
            match={"id": record_id, "buyer_id": owner.uid},
            changes={
                "buyer_id": None,
                "buyer_email": None,
                "claimed_at": None,
                "previous_owner": owner.email,
                "transferred_at": now.isoformat(),
            },
            history_event=HistoryEvent(HistoryAction.RELEASED, now, owner.email).to_document(),
        )
        if document is None:
            raise NotWarrantyOwner("You no longer own this warranty")

        record = WarrantyRecord.from_document(document)
        logger.info("warranty_released", record_id=record_id, previous_owner_id=owner.uid)
        return ReleaseResult(transfer_code=current.code, record=record)

    async def self_declare(
        self,
        buyer: Principal,
        request: ManualWarrantyRequest,
    ) -> WarrantyRecord:
        """
        Record a warranty the platform did not issue.

        The record is owned by ``buyer`` from the start, has no code and
        stays unverified.
        """
        product_model = _required(request.product_model, "Product name")
        terms = compute_expiry(
            request.purchase_date,
            duration_months=request.duration_months,
            custom_expiry_date=request.custom_expiry_date,
        )
        now = self.clock()

        record = WarrantyRecord(
            id=uuid.uuid4().hex,
            code=None,
            product_model=product_model,
            brand=request.brand.strip(),
            serial_number=request.serial_number.strip() or NO_SERIAL,
            purchase_date=request.purchase_date,
            expiry_date=terms.expiry_date,
            duration_months=terms.duration_months,
            type=WarrantyType.MANUAL,
            status=RecordStatus.SELF_DECLARED,
            verification_status=VerificationStatus.UNVERIFIED,
            seller_name=request.seller_name.strip() or DEFAULT_SHOP_NAME,
            buyer_id=buyer.uid,
            buyer_email=buyer.email,
            customer_name=buyer.display_name or DEFAULT_BUYER_NAME,
            notes=request.notes,
            created_at=now,
            history=[HistoryEvent(HistoryAction.DECLARED, now, buyer.email)],
        )
        await self.store.insert_warranty(record.to_document())

        logger.info(
            "warranty_self_declared",
            record_id=record.id,
            buyer_id=buyer.uid,
            custom_expiry=terms.custom,
        )
        return record

    async def get_owned(self, owner: Principal, record_id: str) -> WarrantyRecord:
        document = await self.store.get_warranty(record_id)
        if document is None:
            raise WarrantyNotFound(f"Warranty {record_id} not found")
        record = WarrantyRecord.from_document(document)
        if record.buyer_id != owner.uid:
            raise NotWarrantyOwner("You do not own this warranty")
        return record

    async def buyer_wallet(self, buyer: Principal) -> WalletSummary:
        records = await self._records_for("buyer_id", buyer.uid)
        statuses: dict[str, CoverageStatus] = {}
        counts = StatusCounts()
        for record in records:
            status = self.status_of(record)
            statuses[record.id] = status
            counts.add(status)
        return WalletSummary(records=records, statuses=statuses, counts=counts)

    async def seller_dashboard(self, seller: Principal, recent: int = 5) -> SellerDashboard:
        """Counts by derived status plus the most recently issued records."""
        records = await self._records_for("seller_id", seller.uid)
        counts = StatusCounts()
        claimed = 0
        for record in records:
            counts.add(self.status_of(record))
            if record.is_claimed:
                claimed += 1
        return SellerDashboard(counts=counts, claimed=claimed, recent=records[:recent])

    async def seller_warranties(
        self,
        seller: Principal,
        search: str | None = None,
    ) -> list[WarrantyRecord]:
        """
        List a seller's records, optionally filtered.

        ``search`` matches case-insensitively anywhere in the product model,
        code, customer name or serial number.
        """
        records = await self._records_for("seller_id", seller.uid)
        needle = (search or "").strip().lower()
        if not needle:
            return records
        return [
            r
            for r in records
            if any(
                needle in (value or "").lower()
                for value in (r.product_model, r.code, r.customer_name, r.serial_number)
            )
        ]

    async def _records_for(self, field_name: str, value: str) -> list[WarrantyRecord]:
        documents = await self.store.list_warranties(field_name, value)
        return [WarrantyRecord.from_document(d) for d in documents]

    async def _find_by_code(self, code: str) -> WarrantyRecord:
        document = await self.store.find_warranty("code", code)
        if document is None:
            logger.info("warranty_code_not_found", code=code)
            raise WarrantyNotFound("Warranty code not found. Please check and try again.")
        return WarrantyRecord.from_document(document)


def _required(value: str, label: str) -> str:
    value = value.strip()
    if not value:
        raise InvalidWarrantyInput(f"{label} is required")
    return value
