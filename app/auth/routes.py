# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# Sign-in happens client-side with Supabase Auth on the admin page.
# These routes let the admin UI check who it is signed in as.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, TokenStatus, UserResponse
from app.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    The signed-in user and whether they may use the admin panel.

    Raises:
        401: If not authenticated
    """
    allowed = settings.admin_emails_list
    is_admin = not allowed or (user.email or "").lower() in allowed
    return UserResponse(id=user.id, email=user.email, is_admin=is_admin)


@router.get("/verify", response_model=TokenStatus)
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> TokenStatus:
    """
    Check that a stored token is still valid.

    Raises:
        401: If token is invalid or expired
    """
    return TokenStatus(valid=True, user_id=user.id, email=user.email)
