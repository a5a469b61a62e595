"""
Database Module
===============

Async MongoDB client for the warranty document store.

Usage:
    from shared.database import MongoDBClient

    db = MongoDBClient.get_database()
    doc = await db.warranties.find_one({"code": "CB-ABCD-EFGH"})
"""

from shared.database.mongodb import (
    SELLERS_COLLECTION,
    WARRANTIES_COLLECTION,
    MongoDBClient,
)


__all__ = [
    "MongoDBClient",
    "WARRANTIES_COLLECTION",
    "SELLERS_COLLECTION",
]
