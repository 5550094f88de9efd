# =============================================================================
# core/models/testimonial.py - Testimonial Schemas
# =============================================================================

from __future__ import annotations

from datetime import date as date_type
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TestimonialStatus(str, Enum):
    """Only published testimonials are shown on the public site."""

    PUBLISHED = "Published"
    ARCHIVED = "Archived"


class TestimonialCreate(BaseModel):
    """New testimonial from the admin panel."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    role: str = Field(default="Student", max_length=60)
    testimonial: str = Field(..., min_length=1, max_length=2000)
    status: TestimonialStatus = TestimonialStatus.PUBLISHED
    date: date_type | None = Field(
        default=None,
        description="Defaults to today when omitted"
    )


class TestimonialUpdate(BaseModel):
    """Partial edit; only provided fields are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=120)
    role: str | None = Field(default=None, max_length=60)
    testimonial: str | None = Field(default=None, min_length=1, max_length=2000)
    date: date_type | None = None


class TestimonialStatusUpdate(BaseModel):
    """Publish or archive."""
    status: TestimonialStatus


class TestimonialResponse(BaseModel):
    """A testimonials row."""

    id: str
    name: str
    role: str = ""
    testimonial: str
    status: TestimonialStatus
    date: date_type | None = None

    @classmethod
    def from_row(cls, row: dict) -> TestimonialResponse:
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})
