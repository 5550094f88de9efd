# =============================================================================
# core/models/academy_profile.py - Academy Profile Schemas
# =============================================================================
# The academy has exactly one profile document (fixed id, see
# settings.ACADEMY_PROFILE_ID). It feeds the footer, the about section and
# the contact details on the public site.
# =============================================================================

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl


class FounderBio(BaseModel):
    """One founder/instructor card in the about section."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    title: str = Field(default="", max_length=120)
    bio: str = Field(default="", max_length=4000)


class AcademyProfileUpdate(BaseModel):
    """
    Body of PUT /profile.

    The whole document is replaced, so every field is sent each time.

    Example:
        {
            "email": "contact@academy.com",
            "phone_number": "+91 98765 43210",
            "address": "Pune, Maharashtra",
            "about_academy": "Kathak and semi-classical training since 2015",
            "founder_bios": [{"name": "Priyanka", "title": "Founder", "bio": "..."}],
            "social_profiles": {"instagram": "https://www.instagram.com/academy/"}
        }
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    email: EmailStr | None = None
    phone_number: str = Field(default="", max_length=30)
    address: str = Field(default="", max_length=500)
    about_academy: str = Field(default="", max_length=8000)
    founder_bios: list[FounderBio] = Field(default_factory=list)
    social_profiles: dict[str, HttpUrl] = Field(
        default_factory=dict,
        description="Network name -> profile URL"
    )


class AcademyProfile(BaseModel):
    """The stored profile document."""

    id: str
    email: str | None = None
    phone_number: str = ""
    address: str = ""
    about_academy: str = ""
    founder_bios: list[FounderBio] = Field(default_factory=list)
    social_profiles: dict[str, str] = Field(default_factory=dict)
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict) -> AcademyProfile:
        data = {k: v for k, v in row.items() if k in cls.model_fields}
        # jsonb columns come back as None when never written
        data["founder_bios"] = data.get("founder_bios") or []
        data["social_profiles"] = data.get("social_profiles") or {}
        return cls(**data)
