# =============================================================================
# app/routers/students.py - Enrolled Students (admin)
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, require_admin
from app.dependencies import StudentServiceDep
from core.models.student import StudentCreate, StudentResponse, StudentUpdate

router = APIRouter()

StudentId = Annotated[UUID, Path(description="Student UUID")]


@router.get("", response_model=list[StudentResponse])
def list_students(
    service: StudentServiceDep,
    course: Annotated[str | None, Query(description="Filter by course")] = None,
    user: AuthUser = Depends(require_admin),
):
    """Enrolled students, most recent first."""
    return service.list_students(course=course)


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(
    student_id: StudentId,
    service: StudentServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.get(str(student_id))


@router.post("", response_model=StudentResponse, status_code=201)
def create_student(
    body: StudentCreate,
    service: StudentServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Add a student directly (no inquiry behind it)."""
    return service.create(body)


@router.patch("/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: StudentId,
    body: StudentUpdate,
    service: StudentServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.update(str(student_id), body)


@router.delete("/{student_id}")
def delete_student(
    student_id: StudentId,
    service: StudentServiceDep,
    user: AuthUser = Depends(require_admin),
):
    service.delete(str(student_id))
    return {
        "id": str(student_id),
        "message": "Student deleted successfully",
    }
