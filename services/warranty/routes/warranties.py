"""
Seller Warranty Endpoints.

Issue warranties and browse what a store has issued.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from services.warranty.dependencies import get_lifecycle, store_failure, to_principal
from services.warranty.errors import (
    CodeGenerationExhausted,
    InvalidWarrantyInput,
    StoreUnavailable,
)
from services.warranty.expiry import CoverageStatus
from services.warranty.lifecycle import WarrantyLifecycle
from services.warranty.models import IssueRequest, WarrantyRecord
from shared.auth import User, require_seller
from shared.config import settings
from shared.logging import get_logger
from shared.models import PaginatedResponse, Pagination


logger = get_logger(__name__)

router = APIRouter(prefix="/warranties", tags=["warranties"])


class WarrantyIssueRequest(BaseModel):
    """Request to issue a new warranty."""

    product_model: str = Field(..., min_length=1, description="Product model")
    serial_number: str = Field(..., min_length=1, description="Product serial number")
    brand: str = Field(default="", description="Product brand")
    customer_name: str = Field(default="", description="Customer name")
    customer_phone: str = Field(default="", description="Customer phone")
    purchase_date: date = Field(default_factory=date.today)
    duration_months: int | None = Field(default=None, description="6, 12, 18, 24, 36 or 60")
    custom_expiry_date: date | None = Field(default=None, description="Explicit end of coverage")


class HistoryEntry(BaseModel):
    action: str
    date: datetime
    user: str | None = None


class WarrantyResponse(BaseModel):
    """Warranty record response."""

    id: str
    code: str | None
    product_model: str
    brand: str
    serial_number: str
    purchase_date: date
    expiry_date: date
    duration_months: int
    coverage_status: CoverageStatus
    type: str
    verification_status: str
    seller_id: str | None
    seller_name: str | None
    buyer_id: str | None
    buyer_email: str | None
    customer_name: str
    customer_phone: str
    notes: str
    previous_owner: str | None
    claimed_at: datetime | None
    transferred_at: datetime | None
    created_at: datetime | None
    history: list[HistoryEntry]

    @classmethod
    def from_record(
        cls,
        record: WarrantyRecord,
        coverage_status: CoverageStatus,
    ) -> WarrantyResponse:
        """Create response from WarrantyRecord."""
        return cls(
            id=record.id,
            code=record.code,
            product_model=record.product_model,
            brand=record.brand,
            serial_number=record.serial_number,
            purchase_date=record.purchase_date,
            expiry_date=record.expiry_date,
            duration_months=record.duration_months,
            coverage_status=coverage_status,
            type=record.type.value,
            verification_status=record.verification_status.value,
            seller_id=record.seller_id,
            seller_name=record.seller_name,
            buyer_id=record.buyer_id,
            buyer_email=record.buyer_email,
            customer_name=record.customer_name,
            customer_phone=record.customer_phone,
            notes=record.notes,
            previous_owner=record.previous_owner,
            claimed_at=record.claimed_at,
            transferred_at=record.transferred_at,
            created_at=record.created_at,
            history=[
                HistoryEntry(action=e.action.value, date=e.date, user=e.user)
                for e in record.history
            ],
        )


class SellerDashboardResponse(BaseModel):
    """Seller dashboard statistics."""

    total: int
    active: int
    expiring_soon: int
    expired: int
    claimed: int
    recent: list[WarrantyResponse]


@router.post(
    "/issue",
    response_model=WarrantyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Issue a new warranty",
)
async def issue_warranty(
    request: WarrantyIssueRequest,
    user: Annotated[User, Depends(require_seller)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> WarrantyResponse:
    """
    Issue a warranty for a sale.

    The response carries the code the seller hands to the customer.
    """
    try:
        record = await lifecycle.issue(
            to_principal(user),
            IssueRequest(
                product_model=request.product_model,
                serial_number=request.serial_number,
                purchase_date=request.purchase_date,
                duration_months=request.duration_months,
                custom_expiry_date=request.custom_expiry_date,
                brand=request.brand,
                customer_name=request.customer_name,
                customer_phone=request.customer_phone,
            ),
        )
    except InvalidWarrantyInput as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except CodeGenerationExhausted as e:
        logger.error("warranty_issue_failed", seller_id=user.id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to issue warranty. Please try again.",
        ) from e
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return WarrantyResponse.from_record(record, lifecycle.status_of(record))


@router.get(
    "/seller",
    response_model=PaginatedResponse[WarrantyResponse],
    summary="List warranties issued by the current seller",
)
async def list_seller_warranties(
    user: Annotated[User, Depends(require_seller)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
    search: str | None = Query(default=None, description="Product, code, customer or serial"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> PaginatedResponse[WarrantyResponse]:
    """List the seller's warranties, newest first."""
    try:
        records = await lifecycle.seller_warranties(to_principal(user), search=search)
    except StoreUnavailable as e:
        raise store_failure(e) from e

    pagination = Pagination(page=page, page_size=page_size)
    window = records[pagination.offset : pagination.offset + pagination.limit]

    return PaginatedResponse(
        items=[WarrantyResponse.from_record(r, lifecycle.status_of(r)) for r in window],
        total=len(records),
        page=page,
        page_size=page_size,
        pages=pagination.pages_for(len(records)),
    )


@router.get(
    "/seller/dashboard",
    response_model=SellerDashboardResponse,
    summary="Seller dashboard statistics",
)
async def seller_dashboard(
    user: Annotated[User, Depends(require_seller)],
    lifecycle: Annotated[WarrantyLifecycle, Depends(get_lifecycle)],
) -> SellerDashboardResponse:
    """Totals by coverage status and the most recently issued warranties."""
    try:
        dashboard = await lifecycle.seller_dashboard(
            to_principal(user),
            recent=settings.warranty.recent_limit,
        )
    except StoreUnavailable as e:
        raise store_failure(e) from e

    return SellerDashboardResponse(
        total=dashboard.counts.total,
        active=dashboard.counts.active,
        expiring_soon=dashboard.counts.expiring_soon,
        expired=dashboard.counts.expired,
        claimed=dashboard.claimed,
        recent=[
            WarrantyResponse.from_record(r, lifecycle.status_of(r)) for r in dashboard.recent
        ],
    )
