"""
Unit Tests for Authentication

Tests for token decoding and the admin dependency.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from auth import DEVELOPMENT_ADMIN_ID, decode_access_token, require_admin
from config.settings import settings
from utils.exceptions import AuthenticationError, AuthorizationError


def make_token(secret: str = None, **claims) -> str:
    return jwt.encode(claims, secret or settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestJWTTokens:
    """Tests for JWT token utilities."""

    def test_decode_valid_token(self):
        decoded = decode_access_token(make_token(sub="admin-1", role="admin"))

        assert decoded is not None
        assert decoded["sub"] == "admin-1"
        assert decoded["role"] == "admin"

    def test_invalid_token_returns_none(self):
        """Invalid token should return None."""
        assert decode_access_token("invalid.token.here") is None

    def test_empty_token_returns_none(self):
        """Empty token should return None."""
        assert decode_access_token("") is None

    def test_wrong_secret_returns_none(self):
        assert decode_access_token(make_token(secret="another-secret", sub="x")) is None

    def test_expired_token_returns_none(self):
        expired = datetime.now(timezone.utc) - timedelta(minutes=5)
        assert decode_access_token(make_token(sub="x", exp=expired)) is None


class TestRequireAdmin:

    @pytest.mark.asyncio
    async def test_development_admits_without_token(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "development")
        assert await require_admin(None) == DEVELOPMENT_ADMIN_ID

    @pytest.mark.asyncio
    async def test_production_requires_token(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        with pytest.raises(AuthenticationError):
            await require_admin(None)

    @pytest.mark.asyncio
    async def test_production_rejects_token_without_subject(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        with pytest.raises(AuthenticationError) as exc_info:
            await require_admin(bearer(make_token(role="admin")))
        assert exc_info.value.message == "Could not validate credentials"

    @pytest.mark.asyncio
    async def test_production_rejects_non_admin(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        with pytest.raises(AuthorizationError) as exc_info:
            await require_admin(bearer(make_token(sub="user-1", role="viewer")))
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_production_returns_subject(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        assert await require_admin(bearer(make_token(sub="admin-42", role="admin"))) == "admin-42"
