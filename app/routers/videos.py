# =============================================================================
# app/routers/videos.py - Video Gallery Endpoints
# =============================================================================
# Same surface as photos, plus:
# - an optional thumbnail image on upload
# - signed direct uploads for large files (upload-url -> PUT -> register)
# - temporary signed download URLs
# =============================================================================

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from app.auth import AuthUser, require_admin
from app.dependencies import VideoServiceDep
from app.routers.photos import read_upload
from core.models.media import (
    ArchiveUpdate,
    MediaDeleteResult,
    MediaRecord,
    MediaUpdate,
    MediaView,
    PendingDeleteReport,
    ReconciliationReport,
    RegisterMediaRequest,
    SignedUrlResponse,
    UploadUrlRequest,
    UploadUrlResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

VideoId = Annotated[UUID, Path(description="Video UUID")]


@router.get("", response_model=list[MediaRecord])
def list_videos(service: VideoServiceDep):
    """Public gallery: archived videos are never returned."""
    return service.list_public()


@router.get("/manage", response_model=list[MediaView])
def manage_videos(
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Admin grid: every stored video with its visibility marker."""
    return service.list_admin()


@router.get("/reconcile", response_model=ReconciliationReport)
def reconcile_videos(
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.reconcile()


@router.post("/pending-deletes/retry", response_model=PendingDeleteReport)
def retry_video_deletes(
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Remove files (and thumbnails) left in storage by failed deletes."""
    return service.retry_pending_deletes()


@router.post("", response_model=MediaRecord, status_code=201)
async def upload_video(
    file: Annotated[UploadFile, File(description="Video file")],
    service: VideoServiceDep,
    thumbnail: Annotated[UploadFile | None, File(description="Optional poster image")] = None,
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str, Form()] = "",
    is_archived: Annotated[bool, Form()] = False,
    user: AuthUser = Depends(require_admin),
):
    """
    Upload a video (and optional thumbnail).

    Both files are deleted again if the details row can't be written.
    """
    upload = await read_upload(file, "video.mp4")
    poster = await read_upload(thumbnail, "thumbnail.jpg") if thumbnail is not None else None
    return service.upload(
        upload,
        name=name,
        description=description,
        is_archived=is_archived,
        thumbnail=poster,
    )


@router.post("/upload-url", response_model=UploadUrlResponse)
def create_upload_url(
    body: UploadUrlRequest,
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """
    Get a signed URL to upload a large video straight to storage.

    Call POST /register with the returned public_id once the upload is done.
    """
    return service.create_upload_url(body.filename, name=body.name)


@router.post("/register", response_model=MediaRecord, status_code=201)
def register_video(
    body: RegisterMediaRequest,
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Save the details of a video uploaded through a signed URL."""
    return service.register(
        body.public_id,
        name=body.name,
        description=body.description,
        is_archived=body.is_archived,
        thumbnail_id=body.thumbnail_id,
    )


@router.get("/{video_id}/signed-url", response_model=SignedUrlResponse)
def get_signed_url(
    video_id: VideoId,
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Temporary download link (e.g. for archived videos)."""
    return SignedUrlResponse(
        url=service.signed_url(str(video_id)),
        expires_in=service.signed_url_ttl,
    )


@router.patch("/{video_id}", response_model=MediaRecord)
def update_video(
    video_id: VideoId,
    body: MediaUpdate,
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.update_details(str(video_id), name=body.name, description=body.description)


@router.patch("/{video_id}/archive", response_model=MediaRecord)
def archive_video(
    video_id: VideoId,
    body: ArchiveUpdate,
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    return service.set_archived(str(video_id), body.is_archived)


@router.delete("/{video_id}", response_model=MediaDeleteResult)
def delete_video(
    video_id: VideoId,
    service: VideoServiceDep,
    user: AuthUser = Depends(require_admin),
):
    """Delete the row, then the video and thumbnail files (best effort)."""
    return service.delete(str(video_id))
