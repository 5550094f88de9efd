# =============================================================================
# core/services/testimonial_service.py - Testimonial Business Logic
# =============================================================================

import logging
from datetime import date

from app.exceptions import TestimonialNotFoundError
from core.models.testimonial import (
    TestimonialCreate,
    TestimonialResponse,
    TestimonialStatus,
    TestimonialUpdate,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TABLE = "testimonials"


class TestimonialService:
    """Testimonials shown on the home page, managed from the admin panel."""

    def __init__(self, supabase: SupabaseClient):
        self.supabase = supabase

    def list_published(self) -> list[TestimonialResponse]:
        """Public listing: status = Published only, newest first."""
        rows = self.supabase.fetch_all(
            TABLE,
            filters={"status": TestimonialStatus.PUBLISHED.value},
            order_by="date",
            desc=True,
        )
        return [TestimonialResponse.from_row(row) for row in rows]

    def list_all(self, status: TestimonialStatus | None = None) -> list[TestimonialResponse]:
        rows = self.supabase.fetch_all(
            TABLE,
            filters={"status": status.value if status else None},
            order_by="date",
            desc=True,
        )
        return [TestimonialResponse.from_row(row) for row in rows]

    def get(self, testimonial_id: str) -> TestimonialResponse:
        row = self.supabase.fetch_one(TABLE, testimonial_id)
        if not row:
            raise TestimonialNotFoundError(testimonial_id)
        return TestimonialResponse.from_row(row)

    def create(self, body: TestimonialCreate) -> TestimonialResponse:
        data = body.model_dump(mode="json")
        data["date"] = data.get("date") or date.today().isoformat()
        row = self.supabase.insert(TABLE, data)
        logger.info(f"Created testimonial {row['id']} ({data['status']})")
        return TestimonialResponse.from_row(row)

    def update(self, testimonial_id: str, body: TestimonialUpdate) -> TestimonialResponse:
        data = body.model_dump(mode="json", exclude_none=True)
        if not data:
            return self.get(testimonial_id)

        row = self.supabase.update(TABLE, testimonial_id, data)
        if not row:
            raise TestimonialNotFoundError(testimonial_id)
        return TestimonialResponse.from_row(row)

    def set_status(self, testimonial_id: str, status: TestimonialStatus) -> TestimonialResponse:
        """Publish or archive."""
        row = self.supabase.update(TABLE, testimonial_id, {"status": status.value})
        if not row:
            raise TestimonialNotFoundError(testimonial_id)
        logger.info(f"Testimonial {testimonial_id} -> {status.value}")
        return TestimonialResponse.from_row(row)

    def delete(self, testimonial_id: str) -> None:
        if not self.supabase.delete(TABLE, testimonial_id):
            raise TestimonialNotFoundError(testimonial_id)
        logger.info(f"Deleted testimonial {testimonial_id}")
