# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .email_service import EmailService
from .inquiry_service import InquiryService
from .media_service import MediaService, UploadedFile
from .profile_service import ProfileService
from .storage_service import ObjectStore, S3ObjectStore, SupabaseObjectStore, create_object_store
from .student_service import StudentService
from .testimonial_service import TestimonialService

__all__ = [
    "EmailService",
    "InquiryService",
    "MediaService",
    "UploadedFile",
    "ProfileService",
    "ObjectStore",
    "S3ObjectStore",
    "SupabaseObjectStore",
    "create_object_store",
    "StudentService",
    "TestimonialService",
]
