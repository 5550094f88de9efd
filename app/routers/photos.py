# =============================================================================
# app/routers/photos.py - Photo Gallery Endpoints
# =============================================================================
# GET "" is the public gallery (non-archived only). Everything else is the
# admin media manager: upload, edit, archive, delete, reconciled listing.
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from app.auth import AuthUser, require_admin
from app.dependencies import PhotoServiceDep
from core.models.media import (
    ArchiveUpdate,
    MediaDeleteResult,
    MediaRecord,
    MediaUpdate,
    MediaView,
    PendingDeleteReport,
    ReconciliationReport,
)
from core.services.media_service import UploadedFile

logger = logging.getLogger(__name__)

router = APIRouter()

PhotoId = Annotated[UUID, Path(description="Photo UUID")]


# =============================================================================
# Helper Functions
# =============================================================================

async def read_upload(file: UploadFile, default_name: str) -> UploadedFile:
    """Read a multipart file into memory."""
    content = await file.read()
    return UploadedFile(
        filename=file.filename or default_name,
        content=content,
        content_type=file.content_type,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("", response_model=list[MediaRecord])
def list_photos(service: PhotoServiceDep):
    """Public gallery: archived photos are never returned."""
    return service.list_public()


@router.get("/manage", response_model=list[MediaView])
def manage_photos(
    service: PhotoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """
    Admin grid.

    Every stored photo, archived ones included and marked with
    visibility="archived". Files without details show has_metadata=false.
    """
    return service.list_admin()


@router.get("/reconcile", response_model=ReconciliationReport)
def reconcile_photos(
    service: PhotoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Storage vs. table report, including orphaned files and rows."""
    return service.reconcile()


@router.post("/pending-deletes/retry", response_model=PendingDeleteReport)
def retry_photo_deletes(
    service: PhotoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """
    Remove files left in storage by deletes whose storage step failed.

    Until then those files are kept out of /manage and listed under
    pending_binary_deletes in /reconcile.
    """
    return service.retry_pending_deletes()


@router.post("", response_model=MediaRecord, status_code=201)
async def upload_photo(
    file: Annotated[UploadFile, File(description="Image file")],
    service: PhotoServiceDep,
    name: Annotated[str | None, Form(description="Display name (also used for the file key)")] = None,
    description: Annotated[str, Form()] = "",
    is_archived: Annotated[bool, Form()] = False,
    user: AuthUser = Depends(require_admin),
):
    """
    Upload a photo.

    The file is stored first, then its details row is written. If the row
    can't be written the file is deleted again (502 METADATA_WRITE_ERROR).
    """
    upload = await read_upload(file, "photo.jpg")
    return service.upload(upload, name=name, description=description, is_archived=is_archived)


@router.patch("/{photo_id}", response_model=MediaRecord)
def update_photo(
    photo_id: PhotoId,
    body: MediaUpdate,
    service: PhotoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Edit name and/or description."""
    return service.update_details(str(photo_id), name=body.name, description=body.description)


@router.patch("/{photo_id}/archive", response_model=MediaRecord)
def archive_photo(
    photo_id: PhotoId,
    body: ArchiveUpdate,
    service: PhotoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Hide from (or return to) the public gallery."""
    return service.set_archived(str(photo_id), body.is_archived)


@router.delete("/{photo_id}", response_model=MediaDeleteResult)
def delete_photo(
    photo_id: PhotoId,
    service: PhotoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """
    Delete a photo.

    The photo disappears from every listing even if the file itself could
    not be removed from storage (binary_deleted=false).
    """
    return service.delete(str(photo_id))
