# =============================================================================
# tests/test_content_services.py - Testimonial and Profile Service Tests
# =============================================================================

from datetime import date

import pytest

from app import exceptions
from core.models import testimonial
from core.models.academy_profile import AcademyProfileUpdate, FounderBio
from core.services import testimonial_service
from core.services.profile_service import ProfileService


@pytest.fixture
def testimonials(supabase):
    return testimonial_service.TestimonialService(supabase)


@pytest.fixture
def profiles(supabase):
    return ProfileService(supabase, "main")


# =============================================================================
# Testimonials
# =============================================================================

class TestTestimonialService:
    """Publish/archive and listings."""

    def test_create_defaults_date_to_today(self, testimonials, fake_db):
        created = testimonials.create(
            testimonial.TestimonialCreate(name="Meera", testimonial="Wonderful classes")
        )

        assert created.date == date.today()
        assert fake_db.rows("testimonials")[0]["status"] == "Published"

    def test_public_listing_only_published(self, testimonials, fake_db):
        fake_db.seed("testimonials", name="A", testimonial="x", status="Published", date="2024-01-01")
        fake_db.seed("testimonials", name="B", testimonial="y", status="Archived", date="2024-02-01")
        fake_db.seed("testimonials", name="C", testimonial="z", status="Published", date="2024-03-01")

        result = testimonials.list_published()

        assert [t.name for t in result] == ["C", "A"]

    def test_admin_listing_filters_by_status(self, testimonials, fake_db):
        fake_db.seed("testimonials", name="A", testimonial="x", status="Published", date="2024-01-01")
        fake_db.seed("testimonials", name="B", testimonial="y", status="Archived", date="2024-02-01")

        assert len(testimonials.list_all()) == 2
        archived = testimonials.list_all(status=testimonial.TestimonialStatus.ARCHIVED)
        assert [t.name for t in archived] == ["B"]

    def test_archive_hides_from_public(self, testimonials, fake_db):
        row = fake_db.seed("testimonials", name="A", testimonial="x", status="Published", date="2024-01-01")

        testimonials.set_status(row["id"], testimonial.TestimonialStatus.ARCHIVED)

        assert testimonials.list_published() == []

    def test_update_partial(self, testimonials, fake_db):
        row = fake_db.seed("testimonials", name="A", role="Parent", testimonial="x", status="Published", date="2024-01-01")

        updated = testimonials.update(row["id"], testimonial.TestimonialUpdate(testimonial="Updated"))

        assert updated.testimonial == "Updated"
        assert updated.role == "Parent"

    def test_missing_testimonial(self, testimonials):
        with pytest.raises(exceptions.TestimonialNotFoundError):
            testimonials.delete("missing")


# =============================================================================
# Academy Profile
# =============================================================================

class TestProfileService:
    """The single profile document."""

    def test_empty_profile_before_first_save(self, profiles):
        profile = profiles.get_profile()

        assert profile.id == "main"
        assert profile.founder_bios == []

    def test_save_upserts_fixed_id(self, profiles, fake_db):
        body = AcademyProfileUpdate(
            email="contact@academy.com",
            phone_number="+91 98765 43210",
            about_academy="Kathak since 2015",
            founder_bios=[FounderBio(name="Priyanka", title="Founder")],
            social_profiles={"instagram": "https://www.instagram.com/academy/"},
        )

        profiles.save_profile(body)
        profiles.save_profile(body.model_copy(update={"phone_number": "12345"}))

        rows = fake_db.rows("academy_profiles")
        assert len(rows) == 1
        assert rows[0]["id"] == "main"
        assert rows[0]["phone_number"] == "12345"

        profile = profiles.get_profile()
        assert profile.founder_bios[0].name == "Priyanka"
        assert profile.social_profiles["instagram"] == "https://www.instagram.com/academy/"
