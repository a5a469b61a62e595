"""Tests for public verification."""

from datetime import date

import pytest
import pytest_asyncio

from services.warranty.errors import InvalidWarrantyInput, WarrantyNotFound
from services.warranty.expiry import CoverageStatus
from services.warranty.lifecycle import WarrantyLifecycle
from services.warranty.models import (
    IssueRequest,
    ManualWarrantyRequest,
    Principal,
    WarrantyRecord,
)
from services.warranty.store import InMemoryDocumentStore
from services.warranty.verification import mask_name, verify


TODAY = date(2025, 6, 15)


class TestMaskName:
    """Tests for mask_name."""

    def test_masks_each_word(self) -> None:
        assert mask_name("John Doe") == "J*** D**"

    def test_short_words_kept(self) -> None:
        assert mask_name("Li Na Wang") == "Li Na W***"

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_name(self, name: str | None) -> None:
        assert mask_name(name) == "Unknown"


@pytest_asyncio.fixture
async def issued(lifecycle: WarrantyLifecycle, seller: Principal) -> WarrantyRecord:
    return await lifecycle.issue(
        seller,
        IssueRequest(
            product_model="Galaxy S24",
            serial_number="SN-778899",
            brand="Samsung",
            purchase_date=date(2025, 6, 1),
            duration_months=12,
            customer_name="John Doe",
            customer_phone="+1 555 0100",
        ),
    )


class TestVerify:
    """Tests for verify."""

    @pytest.mark.asyncio
    async def test_by_code(self, store: InMemoryDocumentStore, issued: WarrantyRecord) -> None:
        view = await verify(store, str(issued.code).lower(), TODAY)

        assert view.code == issued.code
        assert view.product_model == "Galaxy S24"
        assert view.owner_name == "J*** D**"
        assert view.coverage_status == CoverageStatus.ACTIVE
        assert view.is_claimed is False
        assert view.verification_status == "verified"

    @pytest.mark.asyncio
    async def test_by_serial(self, store: InMemoryDocumentStore, issued: WarrantyRecord) -> None:
        view = await verify(store, "  SN-778899 ", TODAY)
        assert view.code == issued.code

    @pytest.mark.asyncio
    async def test_view_hides_contact_details(
        self, store: InMemoryDocumentStore, issued: WarrantyRecord
    ) -> None:
        view = await verify(store, issued.code, TODAY)

        assert not hasattr(view, "customer_phone")
        assert not hasattr(view, "buyer_email")

    @pytest.mark.asyncio
    async def test_claimed_flag(
        self,
        store: InMemoryDocumentStore,
        lifecycle: WarrantyLifecycle,
        buyer_a: Principal,
        issued: WarrantyRecord,
    ) -> None:
        await lifecycle.claim(buyer_a, str(issued.code))

        view = await verify(store, issued.code, TODAY)

        assert view.is_claimed is True

    @pytest.mark.asyncio
    async def test_expired_status(
        self, store: InMemoryDocumentStore, issued: WarrantyRecord
    ) -> None:
        view = await verify(store, issued.code, date(2026, 6, 2))
        assert view.coverage_status == CoverageStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_not_found(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(WarrantyNotFound):
            await verify(store, "CB-AAAA-BBBB", TODAY)

    @pytest.mark.asyncio
    async def test_placeholder_serial_not_matched(
        self,
        store: InMemoryDocumentStore,
        lifecycle: WarrantyLifecycle,
        buyer_a: Principal,
    ) -> None:
        await lifecycle.self_declare(
            buyer_a,
            ManualWarrantyRequest(
                product_model="Kettle", purchase_date=date(2025, 1, 1), duration_months=12
            ),
        )

        with pytest.raises(WarrantyNotFound):
            await verify(store, "n/a", TODAY)

    @pytest.mark.asyncio
    async def test_empty_query(self, store: InMemoryDocumentStore) -> None:
        with pytest.raises(InvalidWarrantyInput):
            await verify(store, "   ", TODAY)
