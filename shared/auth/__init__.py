"""
Authentication Module
=====================

Consumes identities issued by the external identity provider.

Features:
- JWT token decoding (and minting for development/tests)
- Role-based access control for sellers and buyers
- FastAPI dependencies for route protection

Usage:
    from shared.auth import get_current_user, require_seller, User

    @app.post("/warranties/issue")
    async def issue(user: User = Depends(require_seller)):
        return {"seller": user.id}
"""

from shared.auth.jwt import (
    create_access_token,
    decode_token,
    TokenData,
)
from shared.auth.dependencies import (
    User,
    get_current_user,
    require_roles,
    require_seller,
    require_buyer,
    oauth2_scheme,
)

__all__ = [
    # JWT
    "create_access_token",
    "decode_token",
    "TokenData",
    # Dependencies
    "User",
    "get_current_user",
    "require_roles",
    "require_seller",
    "require_buyer",
    "oauth2_scheme",
]
