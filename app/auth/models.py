# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================

from pydantic import BaseModel
from uuid import UUID
from typing import Optional


class AuthUser(BaseModel):
    """
    Signed-in user taken from the Supabase JWT.

    Everything comes from the token itself; there is no users table.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None

    class Config:
        frozen = True


class UserResponse(BaseModel):
    """Response of GET /auth/me."""
    id: UUID
    email: Optional[str] = None
    is_admin: bool = False


class TokenStatus(BaseModel):
    """Response of GET /auth/verify."""
    valid: bool
    user_id: Optional[UUID] = None
    email: Optional[str] = None
