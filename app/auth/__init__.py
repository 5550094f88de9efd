# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Verifies Supabase Auth JWTs sent by the admin panel.
#
# Usage:
#   from app.auth import require_admin, AuthUser
#
#   @router.post("")
#   async def create(user: AuthUser = Depends(require_admin)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import get_current_user, require_admin
from app.auth.models import AuthUser, TokenStatus, UserResponse

__all__ = [
    "get_current_user",
    "require_admin",
    "AuthUser",
    "TokenStatus",
    "UserResponse",
]
