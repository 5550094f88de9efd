# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the models, mainly the inquiry state machine:
# - Every (review, status) pair lands in the right board list
# - Terminal states reject changes, re-asserting them is a no-op
# - Contact form validation ignores caller-supplied status fields
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from itertools import product

import pytest
from pydantic import ValidationError

from core.models import (
    AcademyProfile,
    AcademyProfileUpdate,
    BoardBucket,
    EnrollmentStatus,
    InquiryCreate,
    InquiryResponse,
    InquiryState,
    InvalidTransition,
    MediaKind,
    ReviewState,
    StudyMode,
)
from core.models import testimonial


# =============================================================================
# Inquiry State Machine
# =============================================================================

class TestInquiryBucket:
    """Board classification of all nine states."""

    @pytest.mark.parametrize("review,status", list(product(ReviewState, EnrollmentStatus)))
    def test_bucket_for_every_state(self, review, status):
        state = InquiryState(review=review, status=status)

        if review is ReviewState.COMPLETED and status is EnrollmentStatus.ENROLLED:
            assert state.bucket is BoardBucket.ENROLLED
        elif review is ReviewState.COMPLETED and status is EnrollmentStatus.NOT_ENROLLED:
            assert state.bucket is BoardBucket.NOT_ENROLLED
        else:
            assert state.bucket is BoardBucket.INQUIRED

    def test_initial_state(self):
        state = InquiryState.initial()

        assert state.review is ReviewState.UNREVIEWED
        assert state.status is EnrollmentStatus.UNDER_REVIEW
        assert not state.is_terminal

    def test_from_row_parses_stored_strings(self):
        state = InquiryState.from_row({"review": "in progress", "status": "notenrolled"})

        assert state.review is ReviewState.IN_PROGRESS
        assert state.status is EnrollmentStatus.NOT_ENROLLED


class TestInquiryTransition:
    """transition() rules."""

    def test_enrolling_while_under_review_stays_inquired(self):
        state = InquiryState.initial().transition(status=EnrollmentStatus.ENROLLED)

        assert state.status is EnrollmentStatus.ENROLLED
        assert state.bucket is BoardBucket.INQUIRED

    def test_completing_review_of_enrolled_moves_to_enrolled(self):
        state = InquiryState(review="in progress", status="enrolled")

        assert state.transition(review=ReviewState.COMPLETED).bucket is BoardBucket.ENROLLED

    def test_none_fields_keep_current_values(self):
        state = InquiryState(review="in progress", status="notenrolled")

        assert state.transition() == state

    def test_review_can_move_backwards_before_closing(self):
        state = InquiryState(review="completed", status="underreview")

        result = state.transition(review=ReviewState.UNREVIEWED)

        assert result.review is ReviewState.UNREVIEWED

    @pytest.mark.parametrize("status", [EnrollmentStatus.ENROLLED, EnrollmentStatus.NOT_ENROLLED])
    def test_terminal_states_reject_changes(self, status):
        state = InquiryState(review=ReviewState.COMPLETED, status=status)

        with pytest.raises(InvalidTransition):
            state.transition(review=ReviewState.IN_PROGRESS)
        with pytest.raises(InvalidTransition):
            state.transition(status=EnrollmentStatus.UNDER_REVIEW)

    def test_terminal_state_reasserted_is_noop(self):
        state = InquiryState(review="completed", status="enrolled")

        assert state.transition(review=ReviewState.COMPLETED, status=EnrollmentStatus.ENROLLED) == state

    def test_state_is_immutable(self):
        state = InquiryState.initial()

        with pytest.raises(ValidationError):
            state.review = ReviewState.COMPLETED

    def test_invalid_transition_carries_both_states(self):
        state = InquiryState(review="completed", status="notenrolled")

        with pytest.raises(InvalidTransition) as exc_info:
            state.transition(status=EnrollmentStatus.ENROLLED)

        assert exc_info.value.current == state
        assert exc_info.value.requested.status is EnrollmentStatus.ENROLLED


# =============================================================================
# Inquiry Request/Response Models
# =============================================================================

class TestInquiryCreate:
    """Contact form validation."""

    def test_defaults(self):
        body = InquiryCreate(name="Asha", email="asha@example.com", mobile="98765")

        assert body.course == "Kathak Course"
        assert body.mode is StudyMode.ONLINE
        assert body.address == ""

    def test_status_fields_are_ignored(self):
        body = InquiryCreate(
            name="Asha",
            email="asha@example.com",
            mobile="98765",
            review="completed",
            status="enrolled",
        )

        assert "review" not in body.model_dump()
        assert "status" not in body.model_dump()

    @pytest.mark.parametrize("missing", ["name", "email", "mobile"])
    def test_required_fields(self, missing):
        data = {"name": "Asha", "email": "asha@example.com", "mobile": "98765"}
        del data[missing]

        with pytest.raises(ValidationError):
            InquiryCreate(**data)

    def test_invalid_email_rejected(self):
        with pytest.raises(ValidationError):
            InquiryCreate(name="Asha", email="not-an-email", mobile="98765")

    def test_invalid_mode_rejected(self):
        with pytest.raises(ValidationError):
            InquiryCreate(name="Asha", email="asha@example.com", mobile="98765", mode="hybrid")


class TestInquiryResponse:
    def test_bucket_computed_from_row(self):
        row = {
            "id": "abc",
            "name": "Asha",
            "email": "asha@example.com",
            "mobile": "98765",
            "review": "completed",
            "status": "notenrolled",
            "bucket": "inquired",
        }

        assert InquiryResponse.from_row(row).bucket is BoardBucket.NOT_ENROLLED


# =============================================================================
# Other Models
# =============================================================================

class TestMediaKind:
    def test_tables_and_folders(self):
        assert MediaKind.PHOTO.table == "photos"
        assert MediaKind.VIDEO.table == "videos"
        assert MediaKind.VIDEO.folder == "videos"


class TestTestimonialModels:
    def test_default_status_is_published(self):
        body = testimonial.TestimonialCreate(name="Meera", testimonial="Wonderful classes")

        assert body.status is testimonial.TestimonialStatus.PUBLISHED
        assert body.role == "Student"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            testimonial.TestimonialStatusUpdate(status="Draft")


class TestAcademyProfile:
    def test_social_profiles_must_be_urls(self):
        with pytest.raises(ValidationError):
            AcademyProfileUpdate(social_profiles={"instagram": "not a url"})

    def test_from_row_defaults_empty_json_columns(self):
        profile = AcademyProfile.from_row({"id": "main", "founder_bios": None, "social_profiles": None})

        assert profile.founder_bios == []
        assert profile.social_profiles == {}
