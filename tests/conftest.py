"""
Test Configuration
==================

Pytest fixtures for warranty registry tests.
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["STORE_BACKEND"] = "memory"

from services.warranty.lifecycle import WarrantyLifecycle  # noqa: E402
from services.warranty.models import Principal  # noqa: E402
from services.warranty.store import InMemoryDocumentStore  # noqa: E402


FIXED_NOW = datetime(2025, 6, 15, 9, 30, tzinfo=UTC)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Fresh in-memory document store."""
    return InMemoryDocumentStore()


@pytest.fixture
def lifecycle(store: InMemoryDocumentStore) -> WarrantyLifecycle:
    """Lifecycle pinned to 2025-06-15."""
    return WarrantyLifecycle(store, clock=lambda: FIXED_NOW)


@pytest.fixture
def seller() -> Principal:
    return Principal(uid="seller-1", email="shop@example.com", display_name="Gadget Hub")


@pytest.fixture
def buyer_a() -> Principal:
    return Principal(uid="buyer-a", email="alice@example.com", display_name="Alice Smith")


@pytest.fixture
def buyer_b() -> Principal:
    return Principal(uid="buyer-b", email="bob@example.com", display_name="Bob Jones")


@pytest_asyncio.fixture
async def client(store: InMemoryDocumentStore) -> AsyncGenerator[AsyncClient, None]:
    """Test client for the warranty service backed by the fixture store."""
    from services.warranty.dependencies import get_store
    from services.warranty.main import app

    app.dependency_overrides[get_store] = lambda: store
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _headers(sub: str, email: str, name: str, roles: list[str]) -> dict[str, str]:
    from shared.auth import create_access_token

    token = create_access_token({"sub": sub, "email": email, "name": name, "roles": roles})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def seller_headers() -> dict[str, str]:
    return _headers("seller-1", "shop@example.com", "Gadget Hub", ["seller"])


@pytest.fixture
def buyer_headers() -> dict[str, str]:
    return _headers("buyer-a", "alice@example.com", "Alice Smith", ["buyer"])


@pytest.fixture
def other_buyer_headers() -> dict[str, str]:
    return _headers("buyer-b", "bob@example.com", "Bob Jones", ["buyer"])
