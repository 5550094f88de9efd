# =============================================================================
# tests/test_student_service.py - Enrolled Student Tests
# =============================================================================

import pytest

from app.exceptions import StudentNotFoundError
from core.models.student import StudentCreate, StudentUpdate
from core.services.student_service import StudentService


@pytest.fixture
def service(supabase):
    return StudentService(supabase)


class TestEnrollFromInquiry:
    """Copying an inquiry to students."""

    def test_upsert_is_idempotent(self, service, fake_db):
        inquiry = fake_db.seed(
            "student_inquiries",
            name="Asha",
            email="asha@example.com",
            mobile="98765",
            course="Kathak Course",
            mode="online",
            review="completed",
            status="enrolled",
            timestamp="2024-05-01T10:00:00+00:00",
        )

        first = service.enroll_from_inquiry(inquiry)
        second = service.enroll_from_inquiry(inquiry)

        assert first.id == second.id
        assert len(fake_db.rows("students")) == 1


class TestStudentCrud:
    """Admin-managed students."""

    def test_create_direct_student(self, service, fake_db):
        student = service.create(StudentCreate(name="Ravi", email="ravi@example.com", mobile="12345"))

        stored = fake_db.rows("students")[0]
        assert stored["inquiry_id"] is None
        assert stored["status"] == "enrolled"
        assert student.name == "Ravi"

    def test_list_filters_by_course(self, service, fake_db):
        fake_db.seed("students", name="A", email="a@example.com", mobile="12345", course="Kathak Course")
        fake_db.seed("students", name="B", email="b@example.com", mobile="12345", course="Bollywood")

        result = service.list_students(course="Bollywood")

        assert [s.name for s in result] == ["B"]

    def test_update_only_given_fields(self, service, fake_db):
        row = fake_db.seed("students", name="A", email="a@example.com", mobile="12345", course="Kathak Course")

        updated = service.update(row["id"], StudentUpdate(mobile="99999"))

        assert updated.mobile == "99999"
        assert updated.name == "A"

    def test_update_missing_raises(self, service):
        with pytest.raises(StudentNotFoundError):
            service.update("missing", StudentUpdate(name="X"))

    def test_delete(self, service, fake_db):
        row = fake_db.seed("students", name="A", email="a@example.com", mobile="12345")

        service.delete(row["id"])

        assert fake_db.rows("students") == []

    def test_get_missing_raises(self, service):
        with pytest.raises(StudentNotFoundError):
            service.get("missing")
