# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
#
# The backend clients are built once in the lifespan (app/main.py) and kept
# on app.state; the providers below hand them to route handlers. Services
# are cheap wrappers and are built per request from those clients.
#
# Tests replace the three client providers via app.dependency_overrides.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings, get_settings
from core.models.media import MediaKind
from core.services.email_service import EmailService
from core.services.inquiry_service import InquiryService
from core.services.media_service import MediaService
from core.services.profile_service import ProfileService
from core.services.storage_service import ObjectStore
from core.services.student_service import StudentService
from core.services.testimonial_service import TestimonialService
from lib.supabase_client import SupabaseClient


# =============================================================================
# Clients
# =============================================================================

def get_supabase_client(request: Request) -> SupabaseClient:
    """The SupabaseClient built at startup."""
    return request.app.state.supabase


def get_object_store(request: Request) -> ObjectStore:
    """The photo/video object store built at startup."""
    return request.app.state.object_store


def get_email_service(request: Request) -> EmailService:
    return request.app.state.email


SettingsDep = Annotated[Settings, Depends(get_settings)]
SupabaseDep = Annotated[SupabaseClient, Depends(get_supabase_client)]
ObjectStoreDep = Annotated[ObjectStore, Depends(get_object_store)]
EmailDep = Annotated[EmailService, Depends(get_email_service)]


# =============================================================================
# Services
# =============================================================================

def get_student_service(supabase: SupabaseDep) -> StudentService:
    return StudentService(supabase)


def get_inquiry_service(supabase: SupabaseDep) -> InquiryService:
    return InquiryService(supabase, StudentService(supabase))


def _media_service(
    kind: MediaKind,
    supabase: SupabaseClient,
    store: ObjectStore,
    settings: Settings,
) -> MediaService:
    if kind is MediaKind.PHOTO:
        allowed = settings.allowed_photo_extensions_list
        max_bytes = settings.max_photo_upload_bytes
    else:
        allowed = settings.allowed_video_extensions_list
        max_bytes = settings.max_video_upload_bytes
    return MediaService(
        supabase,
        store,
        kind,
        allowed_extensions=allowed,
        max_bytes=max_bytes,
        max_results=settings.MEDIA_LIST_MAX_RESULTS,
        signed_url_ttl=settings.SIGNED_URL_TTL_SECONDS,
    )


def get_photo_service(
    supabase: SupabaseDep,
    store: ObjectStoreDep,
    settings: SettingsDep,
) -> MediaService:
    return _media_service(MediaKind.PHOTO, supabase, store, settings)


def get_video_service(
    supabase: SupabaseDep,
    store: ObjectStoreDep,
    settings: SettingsDep,
) -> MediaService:
    return _media_service(MediaKind.VIDEO, supabase, store, settings)


def get_testimonial_service(supabase: SupabaseDep) -> TestimonialService:
    return TestimonialService(supabase)


def get_profile_service(supabase: SupabaseDep, settings: SettingsDep) -> ProfileService:
    return ProfileService(supabase, settings.ACADEMY_PROFILE_ID)


InquiryServiceDep = Annotated[InquiryService, Depends(get_inquiry_service)]
StudentServiceDep = Annotated[StudentService, Depends(get_student_service)]
PhotoServiceDep = Annotated[MediaService, Depends(get_photo_service)]
VideoServiceDep = Annotated[MediaService, Depends(get_video_service)]
TestimonialServiceDep = Annotated[TestimonialService, Depends(get_testimonial_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
