# =============================================================================
# core/services/student_service.py - Enrolled Student Business Logic
# =============================================================================
# Students arrive two ways:
# - enroll_from_inquiry(): an inquiry reached (completed, enrolled) and is
#   moved here from student_inquiries
# - create(): an admin adds a student directly
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from app.exceptions import EnrollmentMigrationError, StudentNotFoundError
from core.models.student import StudentCreate, StudentResponse, StudentUpdate
from core.models.inquiry import EnrollmentStatus, ReviewState
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

STUDENTS_TABLE = "students"
INQUIRIES_TABLE = "student_inquiries"

# Inquiry columns carried over to the student row
COPIED_FIELDS = ("name", "email", "mobile", "address", "course", "mode", "review", "status")


class StudentService:
    """Service for the enrolled students list."""

    def __init__(self, supabase: SupabaseClient):
        self.supabase = supabase

    def enroll_from_inquiry(self, inquiry: dict[str, Any]) -> StudentResponse:
        """
        Move an enrolled inquiry into the students table.

        Steps:
        1. Upsert the student row keyed by inquiry_id (safe to repeat)
        2. Delete the inquiry row

        If step 2 fails the student row is removed again, so the inquiry is
        never listed in both places. Calling this again retries the move.

        Raises:
            EnrollmentMigrationError: If either step fails
        """
        inquiry_id = str(inquiry["id"])
        data = {field: inquiry.get(field) for field in COPIED_FIELDS}
        data.update({
            "inquiry_id": inquiry_id,
            "inquired_at": inquiry.get("timestamp"),
            "enrolled_at": datetime.now(timezone.utc).isoformat(),
        })

        try:
            student = self.supabase.upsert(STUDENTS_TABLE, data, on_conflict="inquiry_id")
        except SupabaseClientError as e:
            logger.error(f"Could not copy inquiry {inquiry_id} to students: {e}")
            raise EnrollmentMigrationError(inquiry_id, e.message)

        try:
            self.supabase.delete(INQUIRIES_TABLE, inquiry_id)
        except SupabaseClientError as e:
            logger.error(f"Could not remove enrolled inquiry {inquiry_id}, undoing student copy: {e}")
            try:
                self.supabase.delete_where(STUDENTS_TABLE, "inquiry_id", inquiry_id)
            except SupabaseClientError as undo_error:
                logger.error(f"Undo failed; student {student['id']} duplicates inquiry {inquiry_id}: {undo_error}")
            raise EnrollmentMigrationError(inquiry_id, e.message)

        logger.info(f"Enrolled inquiry {inquiry_id} as student {student['id']}")
        return StudentResponse.from_row(student)

    def list_students(self, course: str | None = None) -> list[StudentResponse]:
        """All students, most recently enrolled first."""
        rows = self.supabase.fetch_all(
            STUDENTS_TABLE,
            filters={"course": course},
            order_by="enrolled_at",
            desc=True,
        )
        return [StudentResponse.from_row(row) for row in rows]

    def get(self, student_id: str) -> StudentResponse:
        row = self.supabase.fetch_one(STUDENTS_TABLE, student_id)
        if not row:
            raise StudentNotFoundError(student_id)
        return StudentResponse.from_row(row)

    def create(self, body: StudentCreate) -> StudentResponse:
        """Add a student who never went through the contact form."""
        now = datetime.now(timezone.utc).isoformat()
        data = body.model_dump(mode="json")
        data.update({
            "inquiry_id": None,
            "review": ReviewState.COMPLETED.value,
            "status": EnrollmentStatus.ENROLLED.value,
            "inquired_at": now,
            "enrolled_at": now,
        })
        row = self.supabase.insert(STUDENTS_TABLE, data)
        logger.info(f"Created student {row['id']}")
        return StudentResponse.from_row(row)

    def update(self, student_id: str, body: StudentUpdate) -> StudentResponse:
        data = body.model_dump(mode="json", exclude_none=True)
        if not data:
            return self.get(student_id)

        row = self.supabase.update(STUDENTS_TABLE, student_id, data)
        if not row:
            raise StudentNotFoundError(student_id)
        return StudentResponse.from_row(row)

    def delete(self, student_id: str) -> None:
        if not self.supabase.delete(STUDENTS_TABLE, student_id):
            raise StudentNotFoundError(student_id)
        logger.info(f"Deleted student {student_id}")

    def count(self) -> int:
        return len(self.supabase.fetch_all(STUDENTS_TABLE, columns="id"))
