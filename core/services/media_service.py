# =============================================================================
# core/services/media_service.py - Photo / Video Business Logic
# =============================================================================
# One MediaService per kind (photo, video). Each asset is a binary in the
# object store plus one metadata row in the kind's table. The row holds the
# storage key, so it alone decides what the public gallery shows.
#
# Multi-step writes compensate instead of leaving half-done state:
# - upload: store binaries -> upsert row; if the row fails, binaries are removed
# - delete: record pending delete -> remove row -> remove binaries -> clear
#   the record. A binary that survives keeps its pending record, which hides
#   it from the admin listing until retry_pending_deletes() removes it.
# =============================================================================

import logging
import mimetypes
import re
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    InvalidFileTypeError,
    MediaNotFoundError,
    MetadataWriteError,
    ObjectNotFoundError,
)
from core.models.media import (
    MediaDeleteResult,
    MediaKind,
    MediaRecord,
    MediaView,
    PendingDeleteReport,
    ReconciliationReport,
    UploadUrlResponse,
    Visibility,
)
from core.services.storage_service import ObjectStore, StoredObject
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

THUMBNAIL_FOLDER = "thumbnails"
THUMBNAIL_EXTENSIONS = [".jpg", ".jpeg", ".png", ".webp"]
PENDING_DELETES_TABLE = "media_pending_deletes"


# =============================================================================
# Helper Functions
# =============================================================================

def slugify(value: str) -> str:
    """
    Turn a display name into a storage-safe slug.

    Whitespace runs become "-", everything is lowercased and characters
    outside [a-z0-9._-] are dropped.

    Example:
        slugify("Annual Day  2024!")  # "annual-day-2024"
    """
    slug = re.sub(r"\s+", "-", value.strip().lower())
    slug = re.sub(r"[^a-z0-9._-]", "", slug)
    return re.sub(r"-{2,}", "-", slug).strip("-.")


def file_extension(filename: str) -> str:
    """Lowercased extension with the dot, or "" when there is none."""
    return "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def build_storage_key(folder: str, filename: str, name: str | None = None) -> str:
    """
    Storage key for a new upload.

    A display name gives a readable key (uploading the same name again
    replaces the earlier file); otherwise the key is generated from the
    current time and a random UUID.
    """
    ext = file_extension(filename)
    stem = slugify(name) if name else ""
    if not stem:
        stem = f"{int(time.time() * 1000)}-{uuid.uuid4()}"
    return f"{folder}/{stem}{ext}"


def guess_content_type(filename: str, fallback: str | None = None) -> str:
    content_type, _ = mimetypes.guess_type(filename)
    return content_type or fallback or "application/octet-stream"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class UploadedFile:
    """A file received from a multipart form."""
    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.content)


# =============================================================================
# Service
# =============================================================================

class MediaService:
    """
    Photo or video management.

    Example:
        photos = MediaService(supabase, store, MediaKind.PHOTO,
                              allowed_extensions=[".jpg"], max_bytes=20 * 1024 * 1024)
        record = photos.upload(UploadedFile("stage.jpg", data), name="Stage Show")
    """

    def __init__(
        self,
        supabase: SupabaseClient,
        store: ObjectStore,
        kind: MediaKind,
        allowed_extensions: list[str],
        max_bytes: int,
        max_results: int = 500,
        signed_url_ttl: int = 3600,
    ):
        self.supabase = supabase
        self.store = store
        self.kind = kind
        self.allowed_extensions = allowed_extensions
        self.max_bytes = max_bytes
        self.max_results = max_results
        self.signed_url_ttl = signed_url_ttl

    @property
    def table(self) -> str:
        return self.kind.table

    @property
    def folder(self) -> str:
        return self.kind.folder

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get(self, media_id: str) -> MediaRecord:
        """
        Raises:
            MediaNotFoundError: If no row has this id
        """
        row = self.supabase.fetch_one(self.table, media_id)
        if not row:
            raise MediaNotFoundError(self.kind.value, media_id)
        return MediaRecord.from_row(row)

    def list_public(self) -> list[MediaRecord]:
        """
        Gallery listing: non-archived rows only, newest first.

        The archive filter is a query predicate, so archived rows never
        leave the database for public requests.
        """
        rows = self.supabase.fetch_all(
            self.table,
            filters={"is_archived": False},
            order_by="created_at",
            desc=True,
            limit=self.max_results,
        )
        return [MediaRecord.from_row(row) for row in rows]

    def reconcile(self) -> ReconciliationReport:
        """
        Join the storage listing with the metadata table by storage key.

        - file + row: shown with the row's values
        - file only: shown with defaults (name = file name, no description,
          not archived) and has_metadata=False
        - row only: not shown, reported in orphaned_records
        - file of a deleted asset (pending delete, no row): not shown,
          reported in pending_binary_deletes

        Every row is fetched, not just max_results of them, so each listed
        file finds its row no matter how old it is. Nothing is repaired here.
        """
        objects = self.store.list(self.folder, self.max_results)
        rows = self.supabase.fetch_all(self.table)
        pending = {row["public_id"] for row in self._pending_deletes()}

        metadata = {row["public_id"]: row for row in rows if row.get("public_id")}
        thumbnail_prefix = f"{self.folder}/{THUMBNAIL_FOLDER}/"

        items: list[MediaView] = []
        orphaned_files: list[str] = []
        pending_binary_deletes: list[str] = []
        seen: set[str] = set()

        for obj in objects:
            if obj.key.startswith(thumbnail_prefix):
                continue
            seen.add(obj.key)
            row = metadata.get(obj.key)
            if row is None:
                if obj.key in pending:
                    pending_binary_deletes.append(obj.key)
                    continue
                orphaned_files.append(obj.key)
            items.append(self._to_view(obj, row))

        truncated = len(objects) >= self.max_results
        # A truncated listing cannot prove a row's file is missing
        orphaned_records = [] if truncated else [
            row["id"] for key, row in metadata.items() if key not in seen
        ]

        if orphaned_files or orphaned_records:
            logger.warning(
                f"{self.table}: {len(orphaned_files)} file(s) without metadata, "
                f"{len(orphaned_records)} row(s) without file"
            )

        return ReconciliationReport(
            kind=self.kind,
            items=items,
            orphaned_files=orphaned_files,
            orphaned_records=orphaned_records,
            pending_binary_deletes=pending_binary_deletes,
            truncated=truncated,
        )

    def list_admin(self) -> list[MediaView]:
        """Admin grid: every stored file, archived ones marked."""
        return self.reconcile().items

    def _to_view(self, obj: StoredObject, row: dict[str, Any] | None) -> MediaView:
        row = row or {}
        is_archived = bool(row.get("is_archived", False))
        return MediaView(
            id=row.get("id"),
            public_id=obj.key,
            public_url=row.get("public_url") or self.store.public_url(obj.key),
            name=row.get("name") or obj.filename,
            description=row.get("description") or "",
            is_archived=is_archived,
            visibility=Visibility.ARCHIVED if is_archived else Visibility.PUBLIC,
            has_metadata=bool(row),
            size_bytes=row.get("size_bytes") or obj.size_bytes,
            created_at=row.get("created_at") or obj.last_modified,
            thumbnail_url=row.get("thumbnail_url"),
        )

    def _pending_deletes(self) -> list[dict[str, Any]]:
        return self.supabase.fetch_all(PENDING_DELETES_TABLE, filters={"kind": self.kind.value})

    # -------------------------------------------------------------------------
    # Upload
    # -------------------------------------------------------------------------

    def validate_file(self, file: UploadedFile) -> None:
        """
        Raises:
            InvalidFileTypeError: Extension not allowed for this kind
            EmptyFileError: No bytes received
            FileTooLargeError: Over the size limit
        """
        if file_extension(file.filename) not in self.allowed_extensions:
            raise InvalidFileTypeError(file.filename, self.allowed_extensions)
        if file.size_bytes == 0:
            raise EmptyFileError(file.filename)
        if file.size_bytes > self.max_bytes:
            raise FileTooLargeError(file.size_bytes / (1024 * 1024), self.max_bytes // (1024 * 1024))

    def upload(
        self,
        file: UploadedFile,
        name: str | None = None,
        description: str = "",
        is_archived: bool = False,
        thumbnail: UploadedFile | None = None,
    ) -> MediaRecord:
        """
        Store a new asset.

        Steps:
        1. Validate the file (and thumbnail)
        2. Upload the binary, then the thumbnail if given
        3. Upsert the metadata row keyed by public_id

        If step 3 fails, everything uploaded in step 2 is deleted again and
        MetadataWriteError is raised. If the thumbnail upload fails, the
        main binary is deleted before the error propagates.

        Raises:
            InvalidFileTypeError, EmptyFileError, FileTooLargeError
            StorageUploadError: If a binary upload fails
            MetadataWriteError: If the row could not be written
        """
        self.validate_file(file)
        if thumbnail is not None:
            if file_extension(thumbnail.filename) not in THUMBNAIL_EXTENSIONS:
                raise InvalidFileTypeError(thumbnail.filename, THUMBNAIL_EXTENSIONS)
            if thumbnail.size_bytes == 0:
                raise EmptyFileError(thumbnail.filename)

        display_name = (name or "").strip() or file.filename
        key = build_storage_key(self.folder, file.filename, name)
        content_type = guess_content_type(file.filename, file.content_type)

        logger.info(f"Uploading {self.kind.value}: {file.filename} -> {key} ({file.size_bytes} bytes)")

        uploaded = [self.store.upload(key, file.content, content_type)]

        thumbnail_key = None
        if thumbnail is not None:
            thumbnail_key = build_storage_key(
                f"{self.folder}/{THUMBNAIL_FOLDER}",
                thumbnail.filename,
                f"{display_name}-thumbnail",
            )
            try:
                uploaded.append(self.store.upload(
                    thumbnail_key,
                    thumbnail.content,
                    guess_content_type(thumbnail.filename, thumbnail.content_type),
                ))
            except Exception:
                self._rollback(uploaded)
                raise

        row = {
            "public_id": key,
            "public_url": self.store.public_url(key),
            "name": display_name,
            "description": description or "",
            "is_archived": is_archived,
            "content_type": content_type,
            "size_bytes": file.size_bytes,
            "created_at": _now_iso(),
        }
        if self.kind is MediaKind.VIDEO:
            row["thumbnail_id"] = thumbnail_key
            row["thumbnail_url"] = self.store.public_url(thumbnail_key) if thumbnail_key else None

        try:
            saved = self.supabase.upsert(self.table, row, on_conflict="public_id")
        except SupabaseClientError as e:
            logger.error(f"Metadata write failed for {key}, rolling back upload: {e}")
            self._rollback(uploaded)
            raise MetadataWriteError(key, e.message)

        logger.info(f"Saved {self.kind.value} {saved['id']} ({key})")
        return MediaRecord.from_row(saved)

    def _rollback(self, keys: list[str]) -> None:
        for key in keys:
            if not self.store.delete(key):
                logger.error(f"Rollback could not delete {key}; it is now an orphaned file")

    # -------------------------------------------------------------------------
    # Direct (signed) uploads
    # -------------------------------------------------------------------------

    def create_upload_url(self, filename: str, name: str | None = None) -> UploadUrlResponse:
        """
        Reserve a key and return a signed URL the browser can PUT the file to.

        The asset only becomes visible once register() writes its row.
        """
        if file_extension(filename) not in self.allowed_extensions:
            raise InvalidFileTypeError(filename, self.allowed_extensions)

        key = build_storage_key(self.folder, filename, name)
        signed = self.store.signed_upload(key, self.signed_url_ttl)
        logger.info(f"Issued signed upload for {key}")
        return UploadUrlResponse(
            public_id=signed.key,
            upload_url=signed.url,
            token=signed.token,
            expires_in=self.signed_url_ttl,
        )

    def register(
        self,
        public_id: str,
        name: str | None = None,
        description: str = "",
        is_archived: bool = False,
        thumbnail_id: str | None = None,
    ) -> MediaRecord:
        """
        Write the metadata row for a file uploaded through a signed URL.

        Raises:
            ObjectNotFoundError: If nothing was uploaded under public_id
        """
        if not public_id.startswith(f"{self.folder}/"):
            raise ObjectNotFoundError(public_id)
        if not self.store.exists(public_id):
            raise ObjectNotFoundError(public_id)

        filename = public_id.rsplit("/", 1)[-1]
        row = {
            "public_id": public_id,
            "public_url": self.store.public_url(public_id),
            "name": (name or "").strip() or filename,
            "description": description or "",
            "is_archived": is_archived,
            "content_type": guess_content_type(filename),
            "created_at": _now_iso(),
        }
        if self.kind is MediaKind.VIDEO:
            row["thumbnail_id"] = thumbnail_id
            row["thumbnail_url"] = self.store.public_url(thumbnail_id) if thumbnail_id else None

        saved = self.supabase.upsert(self.table, row, on_conflict="public_id")
        logger.info(f"Registered {self.kind.value} {saved['id']} ({public_id})")
        return MediaRecord.from_row(saved)

    def signed_url(self, media_id: str) -> str:
        """Temporary download URL for an asset."""
        record = self.get(media_id)
        return self.store.signed_url(record.public_id, self.signed_url_ttl)

    # -------------------------------------------------------------------------
    # Edits
    # -------------------------------------------------------------------------

    def update_details(
        self,
        media_id: str,
        name: str | None = None,
        description: str | None = None,
    ) -> MediaRecord:
        """Change the name and/or description."""
        data: dict[str, Any] = {}
        if name is not None:
            data["name"] = name
        if description is not None:
            data["description"] = description
        if not data:
            return self.get(media_id)

        row = self.supabase.update(self.table, media_id, data)
        if not row:
            raise MediaNotFoundError(self.kind.value, media_id)
        return MediaRecord.from_row(row)

    def set_archived(self, media_id: str, is_archived: bool) -> MediaRecord:
        """Hide (archive) or show an asset on the public gallery."""
        row = self.supabase.update(self.table, media_id, {"is_archived": is_archived})
        if not row:
            raise MediaNotFoundError(self.kind.value, media_id)
        logger.info(f"{self.kind.value} {media_id} is_archived={is_archived}")
        return MediaRecord.from_row(row)

    def delete(self, media_id: str) -> MediaDeleteResult:
        """
        Delete an asset.

        Steps:
        1. Record the storage keys as a pending delete
        2. Delete the metadata row (gone from the public gallery)
        3. Delete the binary and thumbnail (best effort)
        4. Clear the pending record once both are gone

        A failed storage delete is logged and reported in the result. The
        pending record stays, so the leftover file is kept out of the admin
        listing until retry_pending_deletes() succeeds.

        Raises:
            MediaNotFoundError: If no row has this id
            SupabaseClientError: If step 1 or 2 fails (nothing is deleted
                from storage in that case)
        """
        record = self.get(media_id)

        self.supabase.upsert(
            PENDING_DELETES_TABLE,
            {
                "public_id": record.public_id,
                "kind": self.kind.value,
                "thumbnail_id": record.thumbnail_id,
                "created_at": _now_iso(),
            },
            on_conflict="public_id",
        )
        self.supabase.delete_where(self.table, "public_id", record.public_id)

        binary_deleted = self._delete_binaries(record.public_id, record.thumbnail_id)
        if not binary_deleted:
            logger.warning(f"{self.kind.value} {media_id} deleted but file {record.public_id} remains in storage")

        return MediaDeleteResult(
            id=record.id,
            public_id=record.public_id,
            binary_deleted=binary_deleted,
            message=(
                f"{self.kind.value.capitalize()} deleted successfully"
                if binary_deleted
                else f"{self.kind.value.capitalize()} removed; the file could not be deleted from storage"
            ),
        )

    def _delete_binaries(self, public_id: str, thumbnail_id: str | None) -> bool:
        """
        Remove an asset's files and, when both are gone, its pending record.

        Returns:
            True if the main binary was deleted
        """
        binary_deleted = self.store.delete(public_id)
        thumbnail_deleted = True
        if thumbnail_id:
            thumbnail_deleted = self.store.delete(thumbnail_id)
            if not thumbnail_deleted:
                logger.warning(f"Thumbnail {thumbnail_id} could not be deleted")

        if binary_deleted and thumbnail_deleted:
            self.supabase.delete_where(PENDING_DELETES_TABLE, "public_id", public_id)
        return binary_deleted

    def retry_pending_deletes(self) -> PendingDeleteReport:
        """
        Retry the storage deletes that failed during delete().

        A key that has a metadata row again (the same name was uploaded
        since) is kept in storage and only its pending record is dropped.
        """
        report = PendingDeleteReport(kind=self.kind)

        for pending in self._pending_deletes():
            key = pending["public_id"]
            if self.supabase.fetch_all(self.table, filters={"public_id": key}, limit=1, columns="id"):
                self.supabase.delete_where(PENDING_DELETES_TABLE, "public_id", key)
                continue
            if self._delete_binaries(key, pending.get("thumbnail_id")):
                report.deleted.append(key)
            else:
                report.remaining.append(key)

        logger.info(
            f"{self.table}: retried pending deletes, "
            f"{len(report.deleted)} removed, {len(report.remaining)} remaining"
        )
        return report
