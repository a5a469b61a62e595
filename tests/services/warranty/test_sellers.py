"""Tests for seller onboarding and profiles."""

from datetime import UTC, datetime

import pytest

from services.warranty.errors import InvalidWarrantyInput, SellerNotFound
from services.warranty.models import Principal
from services.warranty.sellers import DEFAULT_BRAND_COLOR, SellerDirectory
from services.warranty.store import InMemoryDocumentStore


FIXED_NOW = datetime(2025, 6, 15, 9, 30, tzinfo=UTC)


@pytest.fixture
def directory(store: InMemoryDocumentStore) -> SellerDirectory:
    return SellerDirectory(store, clock=lambda: FIXED_NOW)


class TestOnboarding:
    """Tests for complete_onboarding."""

    @pytest.mark.asyncio
    async def test_onboarding_creates_profile(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        profile = await directory.complete_onboarding(
            seller,
            {
                "business_name": "Gadget Hub",
                "business_type": "electronics",
                "trade_license": "TL-123",
                "socials": {"instagram": "@gadgethub"},
            },
        )

        assert profile.seller_id == "seller-1"
        assert profile.business_name == "Gadget Hub"
        assert profile.onboarding_completed is True
        assert profile.brand_color == DEFAULT_BRAND_COLOR
        assert profile.socials["instagram"] == "@gadgethub"
        assert profile.socials["facebook"] == ""
        assert profile.updated_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_business_name_required(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        with pytest.raises(InvalidWarrantyInput, match="Business name"):
            await directory.complete_onboarding(seller, {"business_name": "  "})

    @pytest.mark.asyncio
    async def test_unknown_fields_rejected(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        with pytest.raises(InvalidWarrantyInput, match="Unknown profile fields"):
            await directory.complete_onboarding(
                seller, {"business_name": "Shop", "onboarding_completed": False}
            )

    @pytest.mark.asyncio
    async def test_unknown_social_network(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        with pytest.raises(InvalidWarrantyInput, match="social"):
            await directory.complete_onboarding(
                seller, {"business_name": "Shop", "socials": {"myspace": "x"}}
            )


class TestSettings:
    """Tests for update_settings and get_profile."""

    @pytest.mark.asyncio
    async def test_update_settings(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        await directory.complete_onboarding(seller, {"business_name": "Gadget Hub"})

        profile = await directory.update_settings(
            seller, {"support_phone": "+1 555 0199", "brand_color": "#000000"}
        )

        assert profile.business_name == "Gadget Hub"
        assert profile.support_phone == "+1 555 0199"
        assert profile.brand_color == "#000000"
        assert profile.onboarding_completed is True

    @pytest.mark.asyncio
    async def test_update_before_onboarding(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        with pytest.raises(SellerNotFound):
            await directory.update_settings(seller, {"address": "Main St"})

    @pytest.mark.asyncio
    async def test_blank_business_name(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        await directory.complete_onboarding(seller, {"business_name": "Gadget Hub"})

        with pytest.raises(InvalidWarrantyInput):
            await directory.update_settings(seller, {"business_name": ""})

    @pytest.mark.asyncio
    async def test_public_view_hides_registration(
        self, directory: SellerDirectory, seller: Principal
    ) -> None:
        await directory.complete_onboarding(
            seller, {"business_name": "Gadget Hub", "tax_id": "TAX-9", "trade_license": "TL-1"}
        )

        profile = await directory.get_profile("seller-1")
        public = profile.public_view()

        assert profile.tax_id == "TAX-9"
        assert "tax_id" not in public
        assert "trade_license" not in public
        assert public["business_name"] == "Gadget Hub"

    @pytest.mark.asyncio
    async def test_unknown_seller(self, directory: SellerDirectory) -> None:
        with pytest.raises(SellerNotFound):
            await directory.get_profile("nobody")
