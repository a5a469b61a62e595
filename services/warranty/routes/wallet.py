"""
Buyer Wallet Endpoints.

Claim warranties by code, add self-declared ones, and release owned
warranties to a new owner.
"""

from __future__ import annotations

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from services.warranty.dependencies import get_lifecycle, store_failure, to_principal
from services.warranty.errors import (
    AlreadyClaimed,
    InvalidWarrantyInput,
    NotWarrantyOwner,
    StoreUnavailable,
    WarrantyNotFound,
)
from services.warranty.lifecycle import WarrantyLifecycle
from services.warranty.models import ManualWarrantyRequest
from services.warranty.routes.warranties import WarrantyResponse
from shared.auth import User, require_buyer
from shared.logging import get_logger


logger = get_logger(__name__)

router = APIRouter(prefix="/wallet", tags=["wallet"])


class ClaimRequest(BaseModel):
    """Request to claim a warranty by code."""

    code: str = Field(..., min_length=1, description="Warranty code, e.g. CB-7KQX-M4PD")
    purchase_date: date | None = Field(default=None, description="Optional invoice date check")


class ManualWarrantyCreate(BaseModel):
    """Request to add a warranty the platform did not issue."""

    product_model: str = Field(..., min_length=1, description="Product name")
    purchase_date: date
    brand: str = ""
    serial_number: str = ""
    seller_name: str = Field(default="", description="Shop the product was bought from")
    notes: str = ""
    duration_months: int | None = Field(default=None, description="6, 12, 18, 24, 36 or 60")
    custom_expiry_date: date | None = None


class ReleaseRequest(BaseModel):
    """Release must be explicitly confirmed; it cannot be undone."""

    confirm: bool = False


class ReleaseResponse(BaseModel):
    """Transfer code to share with the next owner."""

    transfer_code: str
    warranty: WarrantyResponse


class WalletResponse(BaseModel):
    """A buyer's warranties with status counts."""

    total: int
    active: int
    expiring_soon: int
    expired: int
    items: list[WarrantyResponse]


def _not_found(e: WarrantyNotFound) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _forbidden(e: NotWarrantyOwner) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


def _bad_request(e: InvalidWarrantyInput) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("", response_model=WalletResponse, summary="List the buyer's warranties")
async def list_wallet(
    user: Annotated[User, Depends(require_buyer)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> WalletResponse:
    """All warranties owned by the current buyer, newest first."""
    try:
        wallet = await lifecycle.buyer_wallet(to_principal(user))
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return WalletResponse(
        total=wallet.counts.total,
        active=wallet.counts.active,
        expiring_soon=wallet.counts.expiring_soon,
        expired=wallet.counts.expired,
        items=[WarrantyResponse.from_record(r, wallet.statuses[r.id]) for r in wallet.records],
    )


@router.post(
    "/claim",
    response_model=WarrantyResponse,
    summary="Claim a warranty by code",
)
async def claim_warranty(
    request: ClaimRequest,
    user: Annotated[User, Depends(require_buyer)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> WarrantyResponse:
    """
    Attach the current buyer to an unclaimed warranty.

    Fails with 404 for unknown codes and 409 when someone else owns it.
    """
    try:
        record = await lifecycle.claim(
            to_principal(user),
            request.code,
            purchase_date=request.purchase_date,
        )
    except WarrantyNotFound as e:
        raise _not_found(e) from e
    except AlreadyClaimed as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except InvalidWarrantyInput as e:
        raise _bad_request(e) from e
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return WarrantyResponse.from_record(record, lifecycle.status_of(record))


@router.post(
    "/manual",
    response_model=WarrantyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a self-declared warranty",
)
async def add_manual_warranty(
    request: ManualWarrantyCreate,
    user: Annotated[User, Depends(require_buyer)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> WarrantyResponse:
    """Record a warranty bought elsewhere. It stays unverified."""
    try:
        record = await lifecycle.self_declare(
            to_principal(user),
            ManualWarrantyRequest(
                product_model=request.product_model,
                purchase_date=request.purchase_date,
                duration_months=request.duration_months,
                custom_expiry_date=request.custom_expiry_date,
                brand=request.brand,
                serial_number=request.serial_number,
                seller_name=request.seller_name,
                notes=request.notes,
            ),
        )
    except InvalidWarrantyInput as e:
        raise _bad_request(e) from e
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return WarrantyResponse.from_record(record, lifecycle.status_of(record))


@router.get(
    "/{record_id}",
    response_model=WarrantyResponse,
    summary="Get an owned warranty",
)
async def get_wallet_warranty(
    record_id: str,
    user: Annotated[User, Depends(require_buyer)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> WarrantyResponse:
    try:
        record = await lifecycle.get_owned(to_principal(user), record_id)
    except WarrantyNotFound as e:
        raise _not_found(e) from e
    except NotWarrantyOwner as e:
        raise _forbidden(e) from e
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return WarrantyResponse.from_record(record, lifecycle.status_of(record))


@router.post(
    "/{record_id}/release",
    response_model=ReleaseResponse,
    summary="Release a warranty for transfer",
)
async def release_warranty(
    record_id: str,
    request: ReleaseRequest,
    user: Annotated[User, Depends(require_buyer)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> ReleaseResponse:
    """
    Remove the warranty from the buyer's account.

    The returned transfer code is shown once; the new owner claims it
    like any other code.
    """
    try:
        result = await lifecycle.release(
            to_principal(user),
            record_id,
            confirm=request.confirm,
        )
    except WarrantyNotFound as e:
        raise _not_found(e) from e
    except NotWarrantyOwner as e:
        raise _forbidden(e) from e
    except InvalidWarrantyInput as e:
        raise _bad_request(e) from e
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return ReleaseResponse(
        transfer_code=result.transfer_code,
        warranty=WarrantyResponse.from_record(result.record, lifecycle.status_of(result.record)),
    )
