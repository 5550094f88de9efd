# =============================================================================
# core/models/media.py - Photo / Video Schemas
# =============================================================================
# A media asset is a binary in the object store plus one metadata row that
# holds the storage key (public_id) and its public URL. The row is what the
# public gallery reads; the admin view additionally joins the raw storage
# listing to surface files that have no row.
# =============================================================================

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class MediaKind(str, Enum):
    """
    The two media collections.

    Each kind has its own table and storage folder.
    """
    PHOTO = "photo"
    VIDEO = "video"

    @property
    def table(self) -> str:
        return "photos" if self is MediaKind.PHOTO else "videos"

    @property
    def folder(self) -> str:
        return self.table


class Visibility(str, Enum):
    """Marker the admin grid shows on each tile."""
    PUBLIC = "public"
    ARCHIVED = "archived"


class MediaRecord(BaseModel):
    """A photos/videos row."""

    id: str
    public_id: str
    public_url: str
    name: str
    description: str = ""
    is_archived: bool = False
    content_type: str | None = None
    size_bytes: int | None = None
    created_at: datetime | None = None
    # Videos only
    thumbnail_id: str | None = None
    thumbnail_url: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> MediaRecord:
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})


class MediaView(BaseModel):
    """
    One tile of the admin media grid.

    Built from a storage listing entry joined with its metadata row; when the
    row is missing, the fields fall back to the stored file's own values.
    """
    id: str | None = Field(default=None, description="Metadata row id; None for orphaned files")
    public_id: str
    public_url: str
    name: str
    description: str = ""
    is_archived: bool = False
    visibility: Visibility = Visibility.PUBLIC
    has_metadata: bool = True
    size_bytes: int | None = None
    created_at: datetime | None = None
    thumbnail_url: str | None = None


class ReconciliationReport(BaseModel):
    """Result of joining the storage listing with the metadata table."""
    kind: MediaKind
    items: list[MediaView] = Field(default_factory=list)
    orphaned_files: list[str] = Field(
        default_factory=list,
        description="Storage keys with no metadata row"
    )
    orphaned_records: list[str] = Field(
        default_factory=list,
        description="Metadata row ids whose file is missing from storage"
    )
    pending_binary_deletes: list[str] = Field(
        default_factory=list,
        description="Deleted assets whose file is still in storage (not shown)"
    )
    truncated: bool = Field(
        default=False,
        description="True when the storage listing hit the max results cap"
    )


# =============================================================================
# Request Models
# =============================================================================

class MediaUpdate(BaseModel):
    """PATCH /{id}: edit name and/or description."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)


class ArchiveUpdate(BaseModel):
    """PATCH /{id}/archive."""
    is_archived: bool


class UploadUrlRequest(BaseModel):
    """Ask for a signed URL to upload a video straight to storage."""
    filename: str = Field(..., min_length=1, max_length=255)
    name: str | None = Field(default=None, max_length=200)


class UploadUrlResponse(BaseModel):
    public_id: str
    upload_url: str
    token: str | None = None
    expires_in: int


class RegisterMediaRequest(BaseModel):
    """Create the metadata row for a file uploaded with a signed URL."""

    model_config = ConfigDict(str_strip_whitespace=True)

    public_id: str = Field(..., min_length=1)
    name: str | None = Field(default=None, max_length=200)
    description: str = Field(default="", max_length=2000)
    is_archived: bool = False
    thumbnail_id: str | None = None


class SignedUrlResponse(BaseModel):
    url: str
    expires_in: int


class MediaDeleteResult(BaseModel):
    """
    Outcome of DELETE /{id}.

    The metadata row is always gone when this is returned; binary_deleted
    reports whether the file itself could be removed.
    """
    id: str
    public_id: str
    binary_deleted: bool
    message: str


class PendingDeleteReport(BaseModel):
    """Outcome of retrying the storage deletes left over from DELETE /{id}."""
    kind: MediaKind
    deleted: list[str] = Field(default_factory=list)
    remaining: list[str] = Field(default_factory=list)
