"""
Shared Models
=============

Pydantic models shared across services.
"""

from shared.models.common import (
    PaginatedResponse,
    Pagination,
    HealthResponse,
)

__all__ = [
    "PaginatedResponse",
    "Pagination",
    "HealthResponse",
]
