"""
Public warranty verification.

Anyone can look a warranty up by code or serial number. The result is a
redacted view: the owner's name is masked and contact details are omitted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from services.warranty.codes import normalize_code
from services.warranty.errors import InvalidWarrantyInput, WarrantyNotFound
from services.warranty.expiry import EXPIRING_SOON_DAYS, CoverageStatus
from services.warranty.models import WarrantyRecord
from services.warranty.store import DocumentStore
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PublicWarrantyView:
    """Redacted warranty details safe to show publicly."""

    code: str | None
    product_model: str
    brand: str
    serial_number: str
    purchase_date: date
    expiry_date: date
    coverage_status: CoverageStatus
    seller_name: str | None
    warranty_type: str
    verification_status: str
    is_claimed: bool
    owner_name: str


def mask_name(name: str | None) -> str:
    """
    Mask each word of a name after its first letter.

    Words of one or two characters are left alone:
    "John Doe" -> "J*** D**".
    """
    if not name:
        return "Unknown"
    return " ".join(
        part if len(part) <= 2 else part[0] + "*" * (len(part) - 1)
        for part in name.split(" ")
    )


def to_public_view(
    record: WarrantyRecord,
    today: date,
    window_days: int = EXPIRING_SOON_DAYS,
) -> PublicWarrantyView:
    return PublicWarrantyView(
        code=record.code,
        product_model=record.product_model,
        brand=record.brand,
        serial_number=record.serial_number,
        purchase_date=record.purchase_date,
        expiry_date=record.expiry_date,
        coverage_status=record.coverage_status(today, window_days),
        seller_name=record.seller_name,
        warranty_type=record.type.value,
        verification_status=record.verification_status.value,
        is_claimed=record.is_claimed,
        owner_name=mask_name(record.customer_name),
    )


async def verify(
    store: DocumentStore,
    query: str,
    today: date,
    window_days: int = EXPIRING_SOON_DAYS,
) -> PublicWarrantyView:
    """
    Find a warranty by code, falling back to serial number.

    Raises:
        InvalidWarrantyInput: Empty query.
        WarrantyNotFound: Nothing matches.
    """
    query = query.strip()
    if not query:
        raise InvalidWarrantyInput("Enter a warranty code or serial number")

    document = await store.find_warranty("code", normalize_code(query))
    if document is None and query.upper() != "N/A":
        document = await store.find_warranty("serial_number", query)

    if document is None:
        logger.info("warranty_verify_miss", query=query)
        raise WarrantyNotFound("No warranty found for this code or serial number")

    record = WarrantyRecord.from_document(document)
    logger.info("warranty_verified", record_id=record.id)
    return to_public_view(record, today, window_days)
