# =============================================================================
# core/models/inquiry.py - Student Inquiry Schemas and Lifecycle
# =============================================================================
# These models define the API contract for the contact form and the admin
# student board:
# - InquiryCreate: what the public contact form submits
# - InquiryResponse: a stored inquiry as returned to the admin panel
# - ReviewState / EnrollmentStatus: the two status fields
# - InquiryState: the (review, status) pair and its transition rules
#
# An inquiry lives in student_inquiries until it is both reviewed and
# enrolled; at that point it is copied to students and removed.
# =============================================================================

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ReviewState(str, Enum):
    """
    Where the admin is in reviewing an inquiry.

    Flow: unreviewed -> in progress -> completed
    """
    UNREVIEWED = "unreviewed"
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"


class EnrollmentStatus(str, Enum):
    """Outcome of an inquiry."""
    UNDER_REVIEW = "underreview"
    NOT_ENROLLED = "notenrolled"
    ENROLLED = "enrolled"


class BoardBucket(str, Enum):
    """The three lists on the admin student board."""
    INQUIRED = "inquired"
    NOT_ENROLLED = "notenrolled"
    ENROLLED = "enrolled"


class StudyMode(str, Enum):
    """How the student wants to attend classes."""
    ONLINE = "online"
    OFFLINE = "offline"


class InvalidTransition(ValueError):
    """Raised when a state change is requested from a closed inquiry."""

    def __init__(self, current: InquiryState, requested: InquiryState):
        super().__init__(
            f"cannot move from {current.as_dict()} to {requested.as_dict()}"
        )
        self.current = current
        self.requested = requested


class InquiryState(BaseModel):
    """
    The (review, status) pair of an inquiry.

    All nine combinations are valid states. Two of them are terminal:
    (completed, enrolled) and (completed, notenrolled). Once an inquiry is
    terminal no field may change; asking for the state it already has is
    a harmless no-op.

    Example:
        state = InquiryState(review="completed", status="underreview")
        state.transition(status=EnrollmentStatus.ENROLLED).bucket
        # BoardBucket.ENROLLED
    """

    model_config = ConfigDict(frozen=True)

    review: ReviewState = ReviewState.UNREVIEWED
    status: EnrollmentStatus = EnrollmentStatus.UNDER_REVIEW

    @classmethod
    def initial(cls) -> InquiryState:
        """State of every freshly submitted inquiry."""
        return cls(review=ReviewState.UNREVIEWED, status=EnrollmentStatus.UNDER_REVIEW)

    @classmethod
    def from_row(cls, row: dict) -> InquiryState:
        return cls(
            review=row.get("review") or ReviewState.UNREVIEWED,
            status=row.get("status") or EnrollmentStatus.UNDER_REVIEW,
        )

    @property
    def bucket(self) -> BoardBucket:
        """Which board list the inquiry belongs to."""
        if self.review is ReviewState.COMPLETED:
            if self.status is EnrollmentStatus.ENROLLED:
                return BoardBucket.ENROLLED
            if self.status is EnrollmentStatus.NOT_ENROLLED:
                return BoardBucket.NOT_ENROLLED
        return BoardBucket.INQUIRED

    @property
    def is_terminal(self) -> bool:
        return self.bucket is not BoardBucket.INQUIRED

    def transition(
        self,
        review: ReviewState | None = None,
        status: EnrollmentStatus | None = None,
    ) -> InquiryState:
        """
        Compute the next state.

        Fields left as None keep their current value.

        Raises:
            InvalidTransition: If the inquiry is terminal and a field changes
        """
        target = InquiryState(
            review=review if review is not None else self.review,
            status=status if status is not None else self.status,
        )
        if self.is_terminal and target != self:
            raise InvalidTransition(self, target)
        return target

    def as_dict(self) -> dict[str, str]:
        return {"review": self.review.value, "status": self.status.value}


# =============================================================================
# Request Models
# =============================================================================

class InquiryCreate(BaseModel):
    """
    Contact form submission.

    Unknown fields (including any review/status the caller sends) are
    ignored; new inquiries always start unreviewed and under review.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    mobile: str = Field(..., min_length=5, max_length=20)
    address: str = Field(default="", max_length=500)
    course: str = Field(default="Kathak Course", max_length=120)
    mode: StudyMode = StudyMode.ONLINE


class InquiryReviewUpdate(BaseModel):
    """Body of PATCH /inquiries/{id}/review."""
    review: ReviewState


class InquiryStatusUpdate(BaseModel):
    """Body of PATCH /inquiries/{id}/status."""
    status: EnrollmentStatus


class InquiryTransitionRequest(BaseModel):
    """Body of PATCH /inquiries/{id}: either field, or both at once."""
    review: ReviewState | None = None
    status: EnrollmentStatus | None = None


# =============================================================================
# Response Models
# =============================================================================

class InquiryResponse(BaseModel):
    """A stored inquiry."""

    id: str
    name: str
    email: str
    mobile: str
    address: str = ""
    course: str = ""
    mode: StudyMode = StudyMode.ONLINE
    review: ReviewState
    status: EnrollmentStatus
    timestamp: datetime | None = None
    updated_at: datetime | None = None
    bucket: BoardBucket = BoardBucket.INQUIRED

    @classmethod
    def from_row(cls, row: dict) -> InquiryResponse:
        state = InquiryState.from_row(row)
        return cls(
            **{k: v for k, v in row.items() if k in cls.model_fields and k != "bucket"},
            bucket=state.bucket,
        )


class TransitionResult(BaseModel):
    """
    Outcome of a review/status change.

    When the change enrolled the student, `inquiry` is the last state of the
    removed inquiry and `student_id` points at the new students row.
    """
    inquiry: InquiryResponse
    moved_to_students: bool = False
    student_id: str | None = None


class BoardSummary(BaseModel):
    """Counts shown in the tabs of the admin student board."""
    inquired: int = 0
    not_enrolled: int = 0
    enrolled: int = 0
