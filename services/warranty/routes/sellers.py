"""
Seller Profile Endpoints.

Onboarding, settings, and the public profile buyers see.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from services.warranty.dependencies import get_directory, store_failure, to_principal
from services.warranty.errors import InvalidWarrantyInput, SellerNotFound, StoreUnavailable
from services.warranty.sellers import DEFAULT_BRAND_COLOR, SellerDirectory, SellerProfile
from shared.auth import User, get_current_user, require_seller


router = APIRouter(prefix="/sellers", tags=["sellers"])


class Socials(BaseModel):
    facebook: str = ""
    instagram: str = ""
    twitter: str = ""
    linkedin: str = ""


class SellerOnboardingRequest(BaseModel):
    """Business details collected by the onboarding wizard."""

    business_name: str = Field(..., min_length=1)
    business_type: str = "retail"
    description: str = ""
    trade_license: str = ""
    tax_id: str = ""
    address: str = ""
    support_email: str = ""
    support_phone: str = ""
    website: str = ""
    brand_color: str = DEFAULT_BRAND_COLOR
    socials: Socials = Field(default_factory=Socials)
    opening_hours: str = ""


class SellerSettingsUpdate(BaseModel):
    """Partial settings update; omitted fields are left unchanged."""

    business_name: str | None = None
    business_type: str | None = None
    description: str | None = None
    trade_license: str | None = None
    tax_id: str | None = None
    address: str | None = None
    support_email: str | None = None
    support_phone: str | None = None
    website: str | None = None
    brand_color: str | None = None
    socials: Socials | None = None
    opening_hours: str | None = None


class SellerProfileResponse(BaseModel):
    """Seller profile as seen by its owner."""

    seller_id: str
    business_name: str
    business_type: str
    description: str
    trade_license: str | None = None
    tax_id: str | None = None
    address: str
    support_email: str
    support_phone: str
    website: str
    brand_color: str
    socials: dict[str, str]
    opening_hours: str
    onboarding_completed: bool
    updated_at: datetime | None

    @classmethod
    def from_profile(cls, profile: SellerProfile, public: bool = False) -> SellerProfileResponse:
        data: dict[str, Any] = profile.public_view() if public else vars(profile).copy()
        return cls(**data)


def _translate(e: Exception) -> HTTPException:
    if isinstance(e, SellerNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, StoreUnavailable):
        return store_failure(e)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.put(
    "/me/onboarding",
    response_model=SellerProfileResponse,
    summary="Complete seller onboarding",
)
async def complete_onboarding(
    request: SellerOnboardingRequest,
    user: Annotated[User, Depends(require_seller)],
    directory: Annotated[SellerDirectory, Depends(get_directory)],
) -> SellerProfileResponse:
    try:
        profile = await directory.complete_onboarding(to_principal(user), request.model_dump())
    except (InvalidWarrantyInput, StoreUnavailable) as e:
        raise _translate(e) from e
    return SellerProfileResponse.from_profile(profile)


@router.patch("/me", response_model=SellerProfileResponse, summary="Update seller settings")
async def update_settings(
    request: SellerSettingsUpdate,
    user: Annotated[User, Depends(require_seller)],
    directory: Annotated[SellerDirectory, Depends(get_directory)],
) -> SellerProfileResponse:
    try:
        changes = {
            k: v for k, v in request.model_dump(exclude_unset=True).items() if v is not None
        }
        profile = await directory.update_settings(to_principal(user), changes)
    except (InvalidWarrantyInput, SellerNotFound, StoreUnavailable) as e:
        raise _translate(e) from e
    return SellerProfileResponse.from_profile(profile)


@router.get("/me", response_model=SellerProfileResponse, summary="Get own seller profile")
async def get_own_profile(
    user: Annotated[User, Depends(require_seller)],
    directory: Annotated[SellerDirectory, Depends(get_directory)],
) -> SellerProfileResponse:
    try:
        profile = await directory.get_profile(user.id)
    except (SellerNotFound, StoreUnavailable) as e:
        raise _translate(e) from e
    return SellerProfileResponse.from_profile(profile)


@router.get(
    "/{seller_id}",
    response_model=SellerProfileResponse,
    summary="Get a seller's public profile",
)
async def get_seller_profile(
    seller_id: str,
    user: Annotated[User, Depends(get_current_user)],
    directory: Annotated[SellerDirectory, Depends(get_directory)],
) -> SellerProfileResponse:
    """Registration numbers are left out of the public profile."""
    try:
        profile = await directory.get_profile(seller_id)
    except (SellerNotFound, StoreUnavailable) as e:
        raise _translate(e) from e
    return SellerProfileResponse.from_profile(profile, public=True)
