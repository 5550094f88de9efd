# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - inquiry.py: Contact form submissions and the review/enrollment lifecycle
# - student.py: Enrolled students
# - media.py: Photos/videos, admin grid view and reconciliation report
# - testimonial.py: Testimonials with publish/archive status
# - academy_profile.py: The single academy profile document
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Inquiry Models - Contact form and student board
# -----------------------------------------------------------------------------
from .inquiry import (
    BoardBucket,
    BoardSummary,
    EnrollmentStatus,
    InquiryCreate,
    InquiryResponse,
    InquiryReviewUpdate,
    InquiryState,
    InquiryStatusUpdate,
    InquiryTransitionRequest,
    InvalidTransition,
    ReviewState,
    StudyMode,
    TransitionResult,
)

# -----------------------------------------------------------------------------
# Student Models
# -----------------------------------------------------------------------------
from .student import (
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)

# -----------------------------------------------------------------------------
# Media Models - Photos and videos
# -----------------------------------------------------------------------------
from .media import (
    ArchiveUpdate,
    MediaDeleteResult,
    MediaKind,
    MediaRecord,
    MediaUpdate,
    MediaView,
    PendingDeleteReport,
    ReconciliationReport,
    RegisterMediaRequest,
    SignedUrlResponse,
    UploadUrlRequest,
    UploadUrlResponse,
    Visibility,
)

# -----------------------------------------------------------------------------
# Testimonial Models
# -----------------------------------------------------------------------------
from .testimonial import (
    TestimonialCreate,
    TestimonialResponse,
    TestimonialStatus,
    TestimonialStatusUpdate,
    TestimonialUpdate,
)

# -----------------------------------------------------------------------------
# Academy Profile Models
# -----------------------------------------------------------------------------
from .academy_profile import (
    AcademyProfile,
    AcademyProfileUpdate,
    FounderBio,
)

__all__ = [
    # Inquiry
    "BoardBucket",
    "BoardSummary",
    "EnrollmentStatus",
    "InquiryCreate",
    "InquiryResponse",
    "InquiryReviewUpdate",
    "InquiryState",
    "InquiryStatusUpdate",
    "InquiryTransitionRequest",
    "InvalidTransition",
    "ReviewState",
    "StudyMode",
    "TransitionResult",
    # Student
    "StudentCreate",
    "StudentResponse",
    "StudentUpdate",
    # Media
    "ArchiveUpdate",
    "MediaDeleteResult",
    "MediaKind",
    "MediaRecord",
    "MediaUpdate",
    "MediaView",
    "PendingDeleteReport",
    "ReconciliationReport",
    "RegisterMediaRequest",
    "SignedUrlResponse",
    "UploadUrlRequest",
    "UploadUrlResponse",
    "Visibility",
    # Testimonial
    "TestimonialCreate",
    "TestimonialResponse",
    "TestimonialStatus",
    "TestimonialStatusUpdate",
    "TestimonialUpdate",
    # Academy profile
    "AcademyProfile",
    "AcademyProfileUpdate",
    "FounderBio",
]
