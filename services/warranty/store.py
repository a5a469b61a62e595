"""
Warranty document store.

Two backends share one protocol: an in-process store for development and
tests, and a MongoDB store backed by Motor. Ownership changes go through
``compare_and_set`` so that a claim or release only lands when the record
still holds the expected owner.
"""

from __future__ import annotations

import asyncio
import copy
from typing import Any, Protocol

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from services.warranty.errors import DuplicateCode, StoreUnavailable
from shared.database import SELLERS_COLLECTION, WARRANTIES_COLLECTION
from shared.logging import get_logger

logger = get_logger(__name__)

Document = dict[str, Any]


class DocumentStore(Protocol):
    """Protocol for the warranty and seller-profile document store."""

    async def insert_warranty(self, document: Document) -> None:
        """Insert a new record. Raises DuplicateCode if the code is taken."""
        ...

    async def get_warranty(self, record_id: str) -> Document | None:
        """Point lookup by record id."""
        ...

    async def find_warranty(self, field: str, value: Any) -> Document | None:
        """First record whose ``field`` equals ``value``."""
        ...

    async def list_warranties(self, field: str, value: Any) -> list[Document]:
        """All records whose ``field`` equals ``value``, newest first."""
        ...

    async def code_exists(self, code: str) -> bool:
        """Whether any record carries ``code``."""
        ...

    async def compare_and_set(
        self,
        match: Document,
        changes: Document,
        history_event: Document | None = None,
    ) -> Document | None:
        """
        Atomically update the first record matching every field in ``match``.

        A ``None`` value in ``match`` matches an absent or null field.
        Returns the updated record, or None when nothing matched.
        """
        ...

    async def get_seller(self, seller_id: str) -> Document | None:
        ...

    async def upsert_seller(self, seller_id: str, fields: Document) -> Document:
        ...

    async def update_seller(self, seller_id: str, fields: Document) -> Document | None:
        ...


def _matches(document: Document, match: Document) -> bool:
    return all(document.get(key) == value for key, value in match.items())


def _newest_first(documents: list[Document]) -> list[Document]:
    return sorted(documents, key=lambda d: d.get("created_at") or "", reverse=True)


class InMemoryDocumentStore:
    """In-process document store for development and tests."""

    def __init__(self) -> None:
        self._warranties: dict[str, Document] = {}
        self._sellers: dict[str, Document] = {}
        self._lock = asyncio.Lock()

    async def insert_warranty(self, document: Document) -> None:
        async with self._lock:
            code = document.get("code")
            if code is not None and any(
                d.get("code") == code for d in self._warranties.values()
            ):
                raise DuplicateCode(f"Warranty code {code} already exists")
            self._warranties[document["id"]] = copy.deepcopy(document)

    async def get_warranty(self, record_id: str) -> Document | None:
        document = self._warranties.get(record_id)
        return copy.deepcopy(document) if document is not None else None

    async def find_warranty(self, field: str, value: Any) -> Document | None:
        for document in self._warranties.values():
            if document.get(field) == value:
                return copy.deepcopy(document)
        return None

    async def list_warranties(self, field: str, value: Any) -> list[Document]:
        found = [
            copy.deepcopy(d) for d in self._warranties.values() if d.get(field) == value
        ]
        return _newest_first(found)

    async def code_exists(self, code: str) -> bool:
        return any(d.get("code") == code for d in self._warranties.values())

    async def compare_and_set(
        self,
        match: Document,
        changes: Document,
        history_event: Document | None = None,
    ) -> Document | None:
        async with self._lock:
            for document in self._warranties.values():
                if not _matches(document, match):
                    continue
                document.update(copy.deepcopy(changes))
                if history_event is not None:
                    document.setdefault("history", []).append(dict(history_event))
                return copy.deepcopy(document)
        return None

    async def get_seller(self, seller_id: str) -> Document | None:
        document = self._sellers.get(seller_id)
        return copy.deepcopy(document) if document is not None else None

    async def upsert_seller(self, seller_id: str, fields: Document) -> Document:
        async with self._lock:
            document = self._sellers.setdefault(seller_id, {"seller_id": seller_id})
            document.update(copy.deepcopy(fields))
            return copy.deepcopy(document)

    async def update_seller(self, seller_id: str, fields: Document) -> Document | None:
        async with self._lock:
            document = self._sellers.get(seller_id)
            if document is None:
                return None
            document.update(copy.deepcopy(fields))
            return copy.deepcopy(document)


def _from_mongo(document: Document | None) -> Document | None:
    if document is None:
        return None
    document = dict(document)
    document["id"] = document.pop("_id")
    return document


def _seller_from_mongo(document: Document | None) -> Document | None:
    if document is None:
        return None
    document = dict(document)
    document["seller_id"] = document.pop("_id")
    return document


class MongoDocumentStore:
    """
    MongoDB-backed document store.

    Record ids live in ``_id``. Driver failures surface as StoreUnavailable.
    """

    def __init__(self, database: Any) -> None:
        self._warranties = database[WARRANTIES_COLLECTION]
        self._sellers = database[SELLERS_COLLECTION]

    async def insert_warranty(self, document: Document) -> None:
        payload = dict(document)
        payload["_id"] = payload.pop("id")
        try:
            await self._warranties.insert_one(payload)
        except DuplicateKeyError as e:
            raise DuplicateCode(f"Warranty code {document.get('code')} already exists") from e
        except PyMongoError as e:
            raise self._unavailable("insert_warranty", e) from e

    async def get_warranty(self, record_id: str) -> Document | None:
        try:
            return _from_mongo(await self._warranties.find_one({"_id": record_id}))
        except PyMongoError as e:
            raise self._unavailable("get_warranty", e) from e

    async def find_warranty(self, field: str, value: Any) -> Document | None:
        try:
            return _from_mongo(await self._warranties.find_one({field: value}))
        except PyMongoError as e:
            raise self._unavailable("find_warranty", e) from e

    async def list_warranties(self, field: str, value: Any) -> list[Document]:
        try:
            cursor = self._warranties.find({field: value}).sort("created_at", DESCENDING)
            return [_from_mongo(doc) async for doc in cursor]  # type: ignore[misc]
        except PyMongoError as e:
            raise self._unavailable("list_warranties", e) from e

    async def code_exists(self, code: str) -> bool:
        try:
            return await self._warranties.count_documents({"code": code}, limit=1) > 0
        except PyMongoError as e:
            raise self._unavailable("code_exists", e) from e

    async def compare_and_set(
        self,
        match: Document,
        changes: Document,
        history_event: Document | None = None,
    ) -> Document | None:
        query = {("_id" if key == "id" else key): value for key, value in match.items()}
        update: Document = {"$set": changes}
        if history_event is not None:
            update["$push"] = {"history": history_event}
        try:
            document = await self._warranties.find_one_and_update(
                query,
                update,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise self._unavailable("compare_and_set", e) from e
        return _from_mongo(document)

    async def get_seller(self, seller_id: str) -> Document | None:
        try:
            return _seller_from_mongo(await self._sellers.find_one({"_id": seller_id}))
        except PyMongoError as e:
            raise self._unavailable("get_seller", e) from e

    async def upsert_seller(self, seller_id: str, fields: Document) -> Document:
        try:
            document = await self._sellers.find_one_and_update(
                {"_id": seller_id},
                {"$set": fields},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise self._unavailable("upsert_seller", e) from e
        return _seller_from_mongo(document)  # type: ignore[return-value]

    async def update_seller(self, seller_id: str, fields: Document) -> Document | None:
        try:
            document = await self._sellers.find_one_and_update(
                {"_id": seller_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise self._unavailable("update_seller", e) from e
        return _seller_from_mongo(document)

    @staticmethod
    def _unavailable(operation: str, error: Exception) -> StoreUnavailable:
        logger.error("document_store_failed", operation=operation, error=str(error))
        return StoreUnavailable(f"Document store call {operation} failed")
