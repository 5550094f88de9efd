# =============================================================================
# core/services/inquiry_service.py - Contact Form and Inquiry Lifecycle
# =============================================================================
# Handles the student_inquiries table:
# - submit(): public contact form
# - list/get/summary/delete: admin student board
# - transition(): review/status changes, including the move to students
#
# Every review/status write is a compare-and-set on the (review, status)
# pair read just before, so two admin sessions can't both fire the move.
# =============================================================================

import logging
from datetime import datetime, timezone

from app.exceptions import (
    InquiryNotFoundError,
    InvalidStatusTransitionError,
    StaleRecordError,
)
from core.models.inquiry import (
    BoardBucket,
    BoardSummary,
    EnrollmentStatus,
    InquiryCreate,
    InquiryResponse,
    InquiryState,
    InvalidTransition,
    ReviewState,
    TransitionResult,
)
from core.services.student_service import INQUIRIES_TABLE, StudentService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class InquiryService:
    """
    Service for inquiries and their status lifecycle.

    Example:
        service = InquiryService(supabase, StudentService(supabase))
        result = service.update_status(inquiry_id, EnrollmentStatus.ENROLLED)
        result.moved_to_students  # True once review is completed
    """

    def __init__(self, supabase: SupabaseClient, students: StudentService):
        self.supabase = supabase
        self.students = students

    # -------------------------------------------------------------------------
    # Contact form
    # -------------------------------------------------------------------------

    def submit(self, body: InquiryCreate) -> InquiryResponse:
        """
        Store a contact form submission.

        The starting state and timestamp are always set here; nothing the
        caller sends can override them.
        """
        now = datetime.now(timezone.utc).isoformat()
        data = body.model_dump(mode="json")
        data.update(InquiryState.initial().as_dict())
        data["timestamp"] = now
        data["updated_at"] = now

        row = self.supabase.insert(INQUIRIES_TABLE, data)
        logger.info(f"New inquiry {row['id']} for {body.course} ({body.mode.value})")
        return InquiryResponse.from_row(row)

    # -------------------------------------------------------------------------
    # Board
    # -------------------------------------------------------------------------

    def list_inquiries(
        self,
        bucket: BoardBucket | None = None,
        review: ReviewState | None = None,
        status: EnrollmentStatus | None = None,
    ) -> list[InquiryResponse]:
        """Inquiries, newest first, optionally narrowed to one board list."""
        rows = self.supabase.fetch_all(
            INQUIRIES_TABLE,
            filters={
                "review": review.value if review else None,
                "status": status.value if status else None,
            },
            order_by="timestamp",
            desc=True,
        )
        inquiries = [InquiryResponse.from_row(row) for row in rows]
        if bucket is not None:
            inquiries = [i for i in inquiries if i.bucket is bucket]
        return inquiries

    def summary(self) -> BoardSummary:
        """
        Counts for the board tabs.

        Enrolled counts the students table; an inquiry still waiting for a
        retried move is not counted twice.
        """
        rows = self.supabase.fetch_all(INQUIRIES_TABLE, columns="id,review,status")
        buckets = [InquiryState.from_row(row).bucket for row in rows]
        return BoardSummary(
            inquired=buckets.count(BoardBucket.INQUIRED),
            not_enrolled=buckets.count(BoardBucket.NOT_ENROLLED),
            enrolled=self.students.count(),
        )

    def get(self, inquiry_id: str) -> InquiryResponse:
        """
        Raises:
            InquiryNotFoundError: If no inquiry has this id
        """
        row = self.supabase.fetch_one(INQUIRIES_TABLE, inquiry_id)
        if not row:
            raise InquiryNotFoundError(inquiry_id)
        return InquiryResponse.from_row(row)

    def delete(self, inquiry_id: str) -> None:
        if not self.supabase.delete(INQUIRIES_TABLE, inquiry_id):
            raise InquiryNotFoundError(inquiry_id)
        logger.info(f"Deleted inquiry {inquiry_id}")

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def transition(
        self,
        inquiry_id: str,
        review: ReviewState | None = None,
        status: EnrollmentStatus | None = None,
    ) -> TransitionResult:
        """
        Change review and/or status.

        Steps:
        1. Read the row and compute the target state (terminal states reject changes)
        2. Write both fields, only if the row still has the state read in step 1
        3. If the target is (completed, enrolled), move the inquiry to students

        Asking for the current state writes nothing; for an inquiry stuck at
        (completed, enrolled) after a failed move it retries step 3.

        Raises:
            InquiryNotFoundError: Unknown id
            InvalidStatusTransitionError: Change requested on a closed inquiry
            StaleRecordError: The row changed between read and write
            EnrollmentMigrationError: The move to students failed
        """
        row = self.supabase.fetch_one(INQUIRIES_TABLE, inquiry_id)
        if not row:
            raise InquiryNotFoundError(inquiry_id)

        current = InquiryState.from_row(row)
        try:
            target = current.transition(review=review, status=status)
        except InvalidTransition as e:
            raise InvalidStatusTransitionError(
                inquiry_id, e.current.as_dict(), e.requested.as_dict()
            )

        if target != current:
            updated = self.supabase.update(
                INQUIRIES_TABLE,
                inquiry_id,
                {**target.as_dict(), "updated_at": datetime.now(timezone.utc).isoformat()},
                match=current.as_dict(),
            )
            if updated is None:
                raise StaleRecordError("Inquiry", inquiry_id)
            row = updated
            logger.info(f"Inquiry {inquiry_id}: {current.as_dict()} -> {target.as_dict()}")

        if target.bucket is not BoardBucket.ENROLLED:
            return TransitionResult(inquiry=InquiryResponse.from_row(row))

        student = self.students.enroll_from_inquiry(row)
        return TransitionResult(
            inquiry=InquiryResponse.from_row(row),
            moved_to_students=True,
            student_id=student.id,
        )

    def update_review(self, inquiry_id: str, review: ReviewState) -> TransitionResult:
        return self.transition(inquiry_id, review=review)

    def update_status(self, inquiry_id: str, status: EnrollmentStatus) -> TransitionResult:
        return self.transition(inquiry_id, status=status)
