# =============================================================================
# app/routers/profile.py - Academy Profile Endpoints
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import AuthUser, require_admin
from app.dependencies import ProfileServiceDep
from core.models.academy_profile import AcademyProfile, AcademyProfileUpdate

router = APIRouter()


@router.get("", response_model=AcademyProfile)
def get_profile(service: ProfileServiceDep):
    """
    Contact details, about text, founder bios and social links.

    Returns an empty profile until an admin saves one.
    """
    return service.get_profile()


@router.put("", response_model=AcademyProfile)
def save_profile(
    body: AcademyProfileUpdate,
    service: ProfileServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Replace the profile document."""
    return service.save_profile(body)
