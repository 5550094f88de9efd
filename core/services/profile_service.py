# =============================================================================
# core/services/profile_service.py - Academy Profile
# =============================================================================
# The profile is a single row with a fixed id. Reading before anything was
# saved returns an empty profile instead of a 404, so the public footer can
# always render.
# =============================================================================

import logging
from datetime import datetime, timezone

from core.models.academy_profile import AcademyProfile, AcademyProfileUpdate
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TABLE = "academy_profiles"


class ProfileService:
    """Read and replace the academy profile document."""

    def __init__(self, supabase: SupabaseClient, profile_id: str):
        self.supabase = supabase
        self.profile_id = profile_id

    def get_profile(self) -> AcademyProfile:
        row = self.supabase.fetch_one(TABLE, self.profile_id)
        if not row:
            return AcademyProfile(id=self.profile_id)
        return AcademyProfile.from_row(row)

    def save_profile(self, body: AcademyProfileUpdate) -> AcademyProfile:
        """Replace the whole document (upsert on the fixed id)."""
        data = body.model_dump(mode="json")
        data["id"] = self.profile_id
        data["updated_at"] = datetime.now(timezone.utc).isoformat()

        row = self.supabase.upsert(TABLE, data, on_conflict="id")
        logger.info(f"Saved academy profile {self.profile_id}")
        return AcademyProfile.from_row(row)
