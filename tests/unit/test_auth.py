"""
Unit tests for authentication module.
"""

import pytest
from datetime import UTC, datetime, timedelta

from fastapi import HTTPException

from shared.auth import (
    User,
    create_access_token,
    decode_token,
    get_current_user,
    require_seller,
)
from shared.auth.jwt import TokenData


class TestJWTTokens:
    """Tests for JWT token functions."""

    def test_create_access_token(self) -> None:
        """Test access token creation."""
        data = {"sub": "user123", "roles": ["buyer"]}
        token = create_access_token(data)

        assert isinstance(token, str)
        assert len(token) > 50

    def test_decode_access_token(self) -> None:
        """Test access token decoding."""
        data = {
            "sub": "user123",
            "roles": ["seller"],
            "email": "test@example.com",
            "name": "Test Shop",
        }
        token = create_access_token(data)

        decoded = decode_token(token, verify_type="access")

        assert decoded is not None
        assert decoded.sub == "user123"
        assert "seller" in decoded.roles
        assert decoded.email == "test@example.com"
        assert decoded.name == "Test Shop"
        assert decoded.token_type == "access"

    def test_decode_wrong_token_type(self) -> None:
        """Test that decoding with wrong type returns None."""
        access_token = create_access_token({"sub": "user123"})

        assert decode_token(access_token, verify_type="refresh") is None

    def test_decode_invalid_token(self) -> None:
        """Test that invalid token returns None."""
        assert decode_token("invalid.token.string") is None

    def test_expired_token(self) -> None:
        token = create_access_token({"sub": "user123"}, expires_delta=timedelta(minutes=-5))
        assert decode_token(token) is None

    def test_missing_subject(self) -> None:
        token = create_access_token({"roles": ["buyer"]})
        assert decode_token(token) is None


class TestTokenData:
    """Tests for TokenData model."""

    def test_token_data_required_fields(self) -> None:
        """Test TokenData requires sub and exp."""
        token_data = TokenData(sub="user123", exp=datetime.now(UTC))

        assert token_data.sub == "user123"
        assert token_data.roles == []
        assert token_data.token_type == "access"
        assert token_data.name is None


class TestDependencies:
    """Tests for the FastAPI auth dependencies."""

    @pytest.mark.asyncio
    async def test_current_user(self) -> None:
        token = create_access_token(
            {"sub": "buyer-1", "roles": ["buyer"], "email": "b@example.com", "name": "Bea"}
        )

        user = await get_current_user(token)

        assert user == User(
            id="buyer-1", email="b@example.com", display_name="Bea", roles=["buyer"]
        )

    @pytest.mark.asyncio
    async def test_missing_token(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(None)
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_role_check(self) -> None:
        buyer = User(id="buyer-1", roles=["buyer"])
        seller = User(id="seller-1", roles=["seller"])

        assert await require_seller(seller) is seller
        with pytest.raises(HTTPException) as exc_info:
            await require_seller(buyer)
        assert exc_info.value.status_code == 403
