"""Warranty registry API routes."""

from services.warranty.routes.warranties import router as warranties_router
from services.warranty.routes.wallet import router as wallet_router
from services.warranty.routes.verify import router as verify_router
from services.warranty.routes.sellers import router as sellers_router

__all__ = [
    "warranties_router",
    "wallet_router",
    "verify_router",
    "sellers_router",
]
