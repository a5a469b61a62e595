"""
Service dependencies.

Builds the document store selected in settings and the domain services
on top of it. Tests swap the store via ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from services.warranty.errors import StoreUnavailable
from services.warranty.lifecycle import WarrantyLifecycle
from services.warranty.models import Principal
from services.warranty.sellers import SellerDirectory
from services.warranty.store import DocumentStore, InMemoryDocumentStore, MongoDocumentStore
from shared.auth import User
from shared.config import StoreBackend, settings
from shared.database import MongoDBClient
from shared.logging import get_logger

logger = get_logger(__name__)

GENERIC_FAILURE = "Something went wrong. Please try again."


@lru_cache
def get_store() -> DocumentStore:
    """Document store singleton for the configured backend."""
    if settings.store.backend == StoreBackend.MONGODB:
        logger.info("document_store_selected", backend="mongodb")
        return MongoDocumentStore(MongoDBClient.get_database())
    logger.info("document_store_selected", backend="memory")
    return InMemoryDocumentStore()


def get_lifecycle(
    store: Annotated[DocumentStore, Depends(get_store)],
) -> WarrantyLifecycle:
    return WarrantyLifecycle(
        store,
        code_max_attempts=settings.warranty.code_max_attempts,
        expiring_soon_days=settings.warranty.expiring_soon_days,
    )


def get_directory(
    store: Annotated[DocumentStore, Depends(get_store)],
) -> SellerDirectory:
    return SellerDirectory(store)


def to_principal(user: User) -> Principal:
    return Principal(uid=user.id, email=user.email, display_name=user.display_name)


def store_failure(error: StoreUnavailable) -> HTTPException:
    """Translate a store outage into the generic retry message."""
    logger.error("request_store_unavailable", error=str(error))
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=GENERIC_FAILURE,
    )
