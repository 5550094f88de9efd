# =============================================================================
# tests/test_auth.py - Supabase JWT Verification Tests
# =============================================================================
# Tokens are signed locally with python-jose and the test JWT secret.
# =============================================================================

import asyncio
import time
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import HTTPException

from app.auth.dependencies import _JWKSCache, decode_token, require_admin
from app.auth.models import AuthUser
from app.config import settings
from tests.conftest import make_token


class TestDecodeToken:
    """HS256 verification."""

    def test_valid_token(self):
        user = decode_token(make_token(email="admin@academy.com"))

        assert user.email == "admin@academy.com"
        assert user.role == "authenticated"

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token(expires_in=-60))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_secret(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token(secret="some-other-secret"))

        assert exc_info.value.status_code == 401

    def test_wrong_audience(self):
        with pytest.raises(HTTPException):
            decode_token(make_token(aud="anon"))

    def test_malformed_user_id(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(make_token(sub="not-a-uuid"))

        assert "malformed" in exc_info.value.detail

    def test_garbage_token(self):
        with pytest.raises(HTTPException):
            decode_token("not.a.jwt")


class TestRequireAdmin:
    """Admin allowlist."""

    def test_any_user_when_allowlist_empty(self, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "")
        user = AuthUser(id=uuid4(), email="someone@example.com")

        assert asyncio.run(require_admin(user)) == user

    def test_listed_email_allowed_case_insensitive(self, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "Owner@Academy.com, instructor@academy.com")
        user = AuthUser(id=uuid4(), email="owner@academy.com")

        assert asyncio.run(require_admin(user)) == user

    def test_unlisted_email_forbidden(self, monkeypatch):
        monkeypatch.setattr(settings, "ADMIN_EMAILS", "owner@academy.com")
        user = AuthUser(id=uuid4(), email="student@example.com")

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(require_admin(user))

        assert exc_info.value.status_code == 403


class TestJWKSCache:
    """Signing key lookup for ES256 tokens."""

    @staticmethod
    def jwks_response(*kids):
        response = MagicMock()
        response.json.return_value = {"keys": [{"kid": kid, "kty": "EC"} for kid in kids]}
        return response

    def test_unknown_kid_triggers_refresh(self):
        cache = _JWKSCache()
        cache.keys = [{"kid": "old"}]
        cache.fetched_at = time.time() - 600

        with patch("app.auth.dependencies.httpx.get", return_value=self.jwks_response("old", "new")) as get:
            key = cache.get("new")

        assert key["kid"] == "new"
        get.assert_called_once()

    def test_known_kid_uses_cache(self):
        cache = _JWKSCache()
        cache.keys = [{"kid": "current"}]
        cache.fetched_at = time.time() - 600

        with patch("app.auth.dependencies.httpx.get") as get:
            key = cache.get("current")

        assert key["kid"] == "current"
        get.assert_not_called()

    def test_unknown_kid_right_after_fetch_not_refetched(self):
        cache = _JWKSCache()
        cache.keys = [{"kid": "current"}]
        cache.fetched_at = time.time()

        with patch("app.auth.dependencies.httpx.get") as get:
            key = cache.get("forged")

        assert key is None
        get.assert_not_called()
