# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error tells the admin UI what failed and, where possible, how to fix it.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


class AcademyException(Exception):
    """
    Base exception for the academy API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "ACADEMY_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found
# =============================================================================

class RecordNotFoundError(AcademyException):
    """Raised when a row with the requested id doesn't exist."""

    def __init__(self, kind: str, record_id: str, code: str):
        super().__init__(
            message=f"{kind} not found: {record_id}",
            code=code,
            status_code=404,
            suggestion=f"Check that the {kind.lower()} id is correct and it hasn't been deleted",
            details={"id": record_id},
        )


class InquiryNotFoundError(RecordNotFoundError):
    def __init__(self, inquiry_id: str):
        super().__init__("Inquiry", inquiry_id, "INQUIRY_NOT_FOUND")


class StudentNotFoundError(RecordNotFoundError):
    def __init__(self, student_id: str):
        super().__init__("Student", student_id, "STUDENT_NOT_FOUND")


class MediaNotFoundError(RecordNotFoundError):
    def __init__(self, kind: str, media_id: str):
        super().__init__(kind.capitalize(), media_id, f"{kind.upper()}_NOT_FOUND")


class TestimonialNotFoundError(RecordNotFoundError):
    def __init__(self, testimonial_id: str):
        super().__init__("Testimonial", testimonial_id, "TESTIMONIAL_NOT_FOUND")


class ObjectNotFoundError(AcademyException):
    """Raised when a storage key has no binary behind it."""

    def __init__(self, key: str):
        super().__init__(
            message=f"No uploaded file found at: {key}",
            code="OBJECT_NOT_FOUND",
            status_code=404,
            suggestion="Upload the file with the signed URL before registering it",
            details={"key": key},
        )


# =============================================================================
# Inquiry Lifecycle
# =============================================================================

class InvalidStatusTransitionError(AcademyException):
    """Raised when a review/enrollment change is not allowed from the current state."""

    def __init__(self, inquiry_id: str, current: dict[str, str], requested: dict[str, str]):
        super().__init__(
            message=f"Inquiry {inquiry_id} is closed and cannot move to the requested state",
            code="INVALID_STATUS_TRANSITION",
            status_code=409,
            suggestion="Completed inquiries are final; create a student directly if needed",
            details={"current": current, "requested": requested},
        )


class StaleRecordError(AcademyException):
    """Raised when a conditional update matched no row (someone else changed it)."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(
            message=f"{kind} {record_id} was changed by another session",
            code="STALE_RECORD",
            status_code=409,
            suggestion="Reload the record and apply your change again",
            details={"id": record_id},
        )


class EnrollmentMigrationError(AcademyException):
    """Raised when copying an enrolled inquiry to students could not complete."""

    def __init__(self, inquiry_id: str, error: str):
        super().__init__(
            message=f"Failed to move inquiry {inquiry_id} to enrolled students: {error}",
            code="ENROLLMENT_MIGRATION_FAILED",
            status_code=500,
            suggestion="Set the status to enrolled again to retry the move",
            details={"inquiry_id": inquiry_id, "error": error},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidFileTypeError(AcademyException):
    """Raised when uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type: {filename}",
            code="INVALID_FILE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class FileTooLargeError(AcademyException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="FILE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb},
        )


class EmptyFileError(AcademyException):
    """Raised when an uploaded file has no content."""

    def __init__(self, filename: str):
        super().__init__(
            message=f"Uploaded file is empty: {filename}",
            code="EMPTY_FILE",
            status_code=400,
            suggestion="Choose the file again and retry the upload",
            details={"filename": filename},
        )


class StorageUploadError(AcademyException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


class StorageOperationError(AcademyException):
    """Raised when listing, signing or checking objects in storage fails."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            message=f"Storage {operation} failed: {error}",
            code="STORAGE_ERROR",
            status_code=502,
            suggestion="Check the storage credentials and that the media bucket exists",
            details={"operation": operation, "error": error},
        )


class MetadataWriteError(AcademyException):
    """Raised when the metadata row could not be written after an upload.

    The uploaded binaries have already been removed again when this is raised.
    """

    def __init__(self, key: str, error: str):
        super().__init__(
            message=f"Failed to save details for {key}: {error}",
            code="METADATA_WRITE_ERROR",
            status_code=502,
            suggestion="The upload was rolled back; try uploading again",
            details={"key": key, "error": error},
        )


# =============================================================================
# Email
# =============================================================================

class EmailDeliveryError(AcademyException):
    """Raised when the SMTP server rejects or drops a message."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to send email: {error}",
            code="EMAIL_DELIVERY_FAILED",
            status_code=502,
            suggestion="Check SMTP_USER / SMTP_PASSWORD and the provider's app password settings",
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def academy_exception_handler(
    request: Request,
    exc: AcademyException
) -> JSONResponse:
    """
    Convert AcademyException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def backend_exception_handler(
    request: Request,
    exc: SupabaseClientError
) -> JSONResponse:
    """
    Surface a Supabase SDK/network failure to the caller as-is.

    The admin UI shows `detail` verbatim in its error toast.
    """
    logger.error(f"Backend error on {request.method} {request.url.path}: {exc}")
    content = {
        "detail": exc.message,
        "code": "BACKEND_ERROR",
        "backend_code": exc.code,
    }
    if exc.suggestion:
        content["suggestion"] = exc.suggestion
    return JSONResponse(status_code=502, content=content)
