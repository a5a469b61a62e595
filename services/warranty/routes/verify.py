"""
Public Verification Endpoint.

Look up a warranty by code or serial number without signing in.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from services.warranty.dependencies import get_store, store_failure
from services.warranty.errors import InvalidWarrantyInput, StoreUnavailable, WarrantyNotFound
from services.warranty.expiry import CoverageStatus
from services.warranty.store import DocumentStore
from services.warranty.verification import verify
from shared.config import settings


router = APIRouter(prefix="/verify", tags=["verify"])


class PublicWarrantyResponse(BaseModel):
    """Redacted warranty details."""

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


@router.get("", response_model=PublicWarrantyResponse, summary="Verify a warranty")
async def verify_warranty(
    store: Annotated[DocumentStore, Depends(get_store)],
    q: str = Query(..., min_length=1, description="Warranty code or serial number"),
) -> PublicWarrantyResponse:
    """Match on code first, then serial number."""
    try:
        view = await verify(
            store,
            q,
            today=datetime.now(UTC).date(),
            window_days=settings.warranty.expiring_soon_days,
        )
    except WarrantyNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except InvalidWarrantyInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return PublicWarrantyResponse(
        code=view.code,
        product_model=view.product_model,
        brand=view.brand,
        serial_number=view.serial_number,
        purchase_date=view.purchase_date,
        expiry_date=view.expiry_date,
        coverage_status=view.coverage_status,
        seller_name=view.seller_name,
        warranty_type=view.warranty_type,
        verification_status=view.verification_status,
        is_claimed=view.is_claimed,
        owner_name=view.owner_name,
    )
