# =============================================================================
# app/routers/testimonials.py - Testimonial Endpoints
# =============================================================================
# GET "" is public and returns Published testimonials only.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, require_admin
from app.dependencies import TestimonialServiceDep
from core.models import testimonial as models

router = APIRouter()

TestimonialId = Annotated[UUID, Path(description="Testimonial UUID")]


@router.get("", response_model=list[models.TestimonialResponse])
def list_published(service: TestimonialServiceDep):
    """Published testimonials, newest first."""
    return service.list_published()


@router.get("/manage", response_model=list[models.TestimonialResponse])
def list_all(
    service: TestimonialServiceDep,
    status: Annotated[models.TestimonialStatus | None, Query(description="Filter by status")] = None,
    user: AuthUser = Depends(require_admin),
):
    return service.list_all(status=status)


@router.post("", response_model=models.TestimonialResponse, status_code=201)
def create_testimonial(
    body: models.TestimonialCreate,
    service: TestimonialServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.create(body)


@router.patch("/{testimonial_id}", response_model=models.TestimonialResponse)
def update_testimonial(
    testimonial_id: TestimonialId,
    body: models.TestimonialUpdate,
    service: TestimonialServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.update(str(testimonial_id), body)


@router.patch("/{testimonial_id}/status", response_model=models.TestimonialResponse)
def set_testimonial_status(
    testimonial_id: TestimonialId,
    body: models.TestimonialStatusUpdate,
    service: TestimonialServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Publish or archive."""
    return service.set_status(str(testimonial_id), body.status)


@router.delete("/{testimonial_id}")
def delete_testimonial(
    testimonial_id: TestimonialId,
    service: TestimonialServiceDep,
    user: AuthUser = Depends(require_admin),
):
    service.delete(str(testimonial_id))
    return {
        "id": str(testimonial_id),
        "message": "Testimonial deleted successfully",
    }
