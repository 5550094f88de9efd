# =============================================================================
# core/models/student.py - Enrolled Student Schemas
# =============================================================================
# A student row is either a copy of an enrolled inquiry (inquiry_id set) or
# was added directly by an admin (inquiry_id empty).
# =============================================================================

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from .inquiry import StudyMode


class StudentCreate(BaseModel):
    """Admin-created student."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    mobile: str = Field(..., min_length=5, max_length=20)
    address: str = Field(default="", max_length=500)
    course: str = Field(default="Kathak Course", max_length=120)
    mode: StudyMode = StudyMode.ONLINE


class StudentUpdate(BaseModel):
    """Partial update; only provided fields are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=120)
    email: EmailStr | None = None
    mobile: str | None = Field(default=None, min_length=5, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    course: str | None = Field(default=None, max_length=120)
    mode: StudyMode | None = None


class StudentResponse(BaseModel):
    """A row of the students table."""

    id: str
    inquiry_id: str | None = None
    name: str
    email: str
    mobile: str
    address: str = ""
    course: str = ""
    mode: StudyMode = StudyMode.ONLINE
    review: str | None = None
    status: str | None = None
    inquired_at: datetime | None = None
    enrolled_at: datetime | None = None

    @classmethod
    def from_row(cls, row: dict) -> StudentResponse:
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})
