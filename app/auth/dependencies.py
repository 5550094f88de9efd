# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Admins sign in on the admin page with Supabase Auth; every admin request
# then carries the Supabase access token as a Bearer header. This module
# verifies that token.
#
# Supports both:
# - ES256 (Supabase JWT signing keys) via the project's JWKS endpoint
# - HS256 (legacy Supabase JWT secret)
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.delete("/{photo_id}")
#   async def delete_photo(photo_id: str, user: AuthUser = Depends(require_admin)):
#       ...
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.auth.models import AuthUser

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

JWKS_CACHE_TTL = 3600  # 1 hour
JWKS_MIN_REFRESH_INTERVAL = 60  # seconds between refreshes triggered by unknown kids
AUDIENCE = "authenticated"


class _JWKSCache:
    """
    Signing keys of the Supabase project.

    Refreshed when older than an hour, or early when a token names a kid
    the cache does not know (the project rotated its keys).
    """

    def __init__(self):
        self.keys: list[dict[str, Any]] = []
        self.fetched_at: float = 0

    @property
    def url(self) -> str:
        return f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/.well-known/jwks.json"

    def get(self, kid: str) -> dict[str, Any] | None:
        if not self.keys or time.time() - self.fetched_at > JWKS_CACHE_TTL:
            self.refresh()
        key = self._find(kid)
        if key is None and time.time() - self.fetched_at > JWKS_MIN_REFRESH_INTERVAL:
            logger.info(f"Unknown signing key {kid}, refreshing JWKS")
            self.refresh()
            key = self._find(kid)
        return key

    def _find(self, kid: str) -> dict[str, Any] | None:
        return next((key for key in self.keys if key.get("kid") == kid), None)

    def refresh(self) -> None:
        try:
            response = httpx.get(self.url, timeout=10)
            response.raise_for_status()
        except httpx.HTTPError as e:
            # Keep serving the previous keys while Supabase is unreachable
            logger.warning(f"Failed to fetch JWKS: {e}")
            return
        self.keys = response.json().get("keys", [])
        self.fetched_at = time.time()
        logger.debug(f"Fetched {len(self.keys)} signing key(s) from {self.url}")


_jwks = _JWKSCache()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_signing_key(token: str) -> tuple[Any, str]:
    """
    Pick the verification key for a token from its header.

    Returns:
        Tuple of (key, algorithm)

    Raises:
        HTTPException: 401 when no usable key exists
    """
    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        raise _unauthorized("Invalid token: unreadable header")

    alg = header.get("alg", "HS256")
    if alg == "HS256":
        if not settings.SUPABASE_JWT_SECRET:
            logger.error("HS256 token received but SUPABASE_JWT_SECRET is not set")
            raise _unauthorized("Token verification is not configured")
        return settings.SUPABASE_JWT_SECRET, "HS256"

    kid = header.get("kid")
    key = _jwks.get(kid) if kid else None
    if key is None:
        logger.warning(f"No signing key for alg={alg}, kid={kid}")
        raise _unauthorized("Invalid token: unknown signing key")
    return key, alg


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no user
    """
    signing_key, algorithm = _get_signing_key(token)

    try:
        payload = jwt.decode(token, signing_key, algorithms=[algorithm], audience=AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token: missing user ID")
    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"), role=payload.get("role"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Extract and validate the signed-in user.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def require_admin(user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """
    Allow only academy admins.

    With ADMIN_EMAILS empty every signed-in Supabase user is an admin (the
    project has no public sign-up). Otherwise the token's email must be
    listed.

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    allowed = settings.admin_emails_list
    if allowed and (user.email or "").lower() not in allowed:
        logger.warning(f"Rejected non-admin user {user.id} ({user.email})")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
