# =============================================================================
# app/routers/inquiries.py - Contact Form and Student Board
# =============================================================================
# POST is public (the site's contact form); everything else is admin-only.
#
# Review/status changes go through InquiryService.transition(), which moves
# an inquiry to the students table once it is (completed, enrolled).
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query

from app.auth import AuthUser, require_admin
from app.dependencies import EmailDep, InquiryServiceDep
from core.models.inquiry import (
    BoardBucket,
    BoardSummary,
    EnrollmentStatus,
    InquiryCreate,
    InquiryResponse,
    InquiryReviewUpdate,
    InquiryStatusUpdate,
    InquiryTransitionRequest,
    ReviewState,
    TransitionResult,
)

logger = logging.getLogger(__name__)

router = APIRouter()

InquiryId = Annotated[UUID, Path(description="Inquiry UUID")]


# =============================================================================
# Public
# =============================================================================

@router.post("", response_model=InquiryResponse, status_code=201)
def submit_inquiry(
    body: InquiryCreate,
    background_tasks: BackgroundTasks,
    service: InquiryServiceDep,
    email: EmailDep,
):
    """
    Submit the contact form.

    The inquiry always starts as (unreviewed, underreview). The thank-you
    and notification emails are sent after the response; a mail failure
    does not undo the submission.
    """
    inquiry = service.submit(body)
    background_tasks.add_task(email.notify_in_background, body.model_dump(mode="json"))
    return inquiry


# =============================================================================
# Admin
# =============================================================================

@router.get("", response_model=list[InquiryResponse])
def list_inquiries(
    service: InquiryServiceDep,
    bucket: Annotated[BoardBucket | None, Query(description="Board list")] = None,
    review: Annotated[ReviewState | None, Query(description="Filter by review state")] = None,
    status: Annotated[EnrollmentStatus | None, Query(description="Filter by enrollment status")] = None,
    user: AuthUser = Depends(require_admin),
):
    """List inquiries, newest first."""
    return service.list_inquiries(bucket=bucket, review=review, status=status)


@router.get("/summary", response_model=BoardSummary)
def board_summary(
    service: InquiryServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Counts for the inquired / not enrolled / enrolled tabs."""
    return service.summary()


@router.get("/{inquiry_id}", response_model=InquiryResponse)
def get_inquiry(
    inquiry_id: InquiryId,
    service: InquiryServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.get(str(inquiry_id))


@router.patch("/{inquiry_id}", response_model=TransitionResult)
def transition_inquiry(
    inquiry_id: InquiryId,
    body: InquiryTransitionRequest,
    service: InquiryServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """
    Set review and/or status in one call.

    Returns 409 when the inquiry is already closed or was changed by
    another admin session in the meantime.
    """
    return service.transition(str(inquiry_id), review=body.review, status=body.status)


@router.patch("/{inquiry_id}/review", response_model=TransitionResult)
def update_review_status(
    inquiry_id: InquiryId,
    body: InquiryReviewUpdate,
    service: InquiryServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.update_review(str(inquiry_id), body.review)


@router.patch("/{inquiry_id}/status", response_model=TransitionResult)
def update_enrollment_status(
    inquiry_id: InquiryId,
    body: InquiryStatusUpdate,
    service: InquiryServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """
    Set the enrollment status.

    With review already completed, "enrolled" moves the inquiry to the
    students list (moved_to_students=true in the response).
    """
    return service.update_status(str(inquiry_id), body.status)


@router.delete("/{inquiry_id}")
def delete_inquiry(
    inquiry_id: InquiryId,
    service: InquiryServiceDep,
    user: AuthUser = Depends(require_admin),
):
    service.delete(str(inquiry_id))
    return {
        "id": str(inquiry_id),
        "message": "Inquiry deleted successfully",
    }
