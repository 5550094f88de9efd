# =============================================================================
# core/services/storage_service.py - Object Storage Operations
# =============================================================================
# Handles photo/video binaries. Two interchangeable backends:
# - SupabaseObjectStore: Supabase Storage bucket (default)
# - S3ObjectStore: AWS S3 bucket through boto3
#
# Both are built once at startup by create_object_store() and injected into
# the media services. Keys look like "photos/<file>" or "videos/<file>".
# =============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.exceptions import StorageOperationError, StorageUploadError
from lib.supabase_client import SupabaseClient

if TYPE_CHECKING:
    from app.config import Settings

logger = logging.getLogger(__name__)


@dataclass
class StoredObject:
    """One entry of a storage listing."""
    key: str
    size_bytes: int | None = None
    content_type: str | None = None
    last_modified: datetime | None = None

    @property
    def filename(self) -> str:
        return self.key.rsplit("/", 1)[-1]


@dataclass
class SignedUpload:
    """A pre-authorized upload target for direct browser uploads."""
    key: str
    url: str
    token: str | None = None


def _parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


class ObjectStore(ABC):
    """
    Minimal object storage interface used by the media services.

    upload/list/sign/exists raise on failure; delete is best-effort and
    reports failure through its return value.
    """

    backend: str = "unknown"

    @abstractmethod
    def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Store bytes under key (replacing any existing object). Returns the key."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete an object. Returns False instead of raising when it fails."""

    @abstractmethod
    def list(self, folder: str, limit: int) -> list[StoredObject]:
        """List objects directly under folder, newest first, at most `limit`."""

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Permanent public URL for an object."""

    @abstractmethod
    def signed_url(self, key: str, expires_in: int) -> str:
        """Temporary download URL."""

    @abstractmethod
    def signed_upload(self, key: str, expires_in: int) -> SignedUpload:
        """Temporary upload target for key."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        """Whether an object is stored under key."""

    @abstractmethod
    def ping(self) -> None:
        """Raise if the bucket is unreachable."""


# =============================================================================
# Supabase Storage
# =============================================================================

class SupabaseObjectStore(ObjectStore):
    """Supabase Storage bucket."""

    backend = "supabase"

    def __init__(self, supabase: SupabaseClient, bucket: str):
        self._supabase = supabase
        self.bucket = bucket

    def _bucket(self):
        return self._supabase.raw.storage.from_(self.bucket)

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        try:
            self._bucket().upload(
                path=key,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        logger.info(f"Uploaded file to storage: {key}")
        return key

    def delete(self, key: str) -> bool:
        try:
            self._bucket().remove([key])
        except Exception as e:
            logger.error(f"Failed to delete file {key}: {e}")
            return False

        logger.info(f"Deleted file from storage: {key}")
        return True

    def list(self, folder: str, limit: int) -> list[StoredObject]:
        try:
            entries = self._bucket().list(
                folder,
                {
                    "limit": limit,
                    "offset": 0,
                    "sortBy": {"column": "created_at", "order": "desc"},
                },
            ) or []
        except Exception as e:
            logger.error(f"Failed to list files in {folder}: {e}")
            raise StorageOperationError("list", str(e))

        objects = []
        for entry in entries:
            # Sub-folders come back as entries without an id
            if not entry.get("id"):
                continue
            metadata = entry.get("metadata") or {}
            objects.append(StoredObject(
                key=f"{folder}/{entry['name']}",
                size_bytes=metadata.get("size"),
                content_type=metadata.get("mimetype"),
                last_modified=_parse_timestamp(entry.get("created_at") or entry.get("updated_at")),
            ))
        return objects

    def public_url(self, key: str) -> str:
        return self._bucket().get_public_url(key).rstrip("?")

    def signed_url(self, key: str, expires_in: int) -> str:
        try:
            result = self._bucket().create_signed_url(key, expires_in)
        except Exception as e:
            logger.error(f"Failed to sign URL for {key}: {e}")
            raise StorageOperationError("sign", str(e))
        return result.get("signedURL") or result.get("signedUrl")

    def signed_upload(self, key: str, expires_in: int) -> SignedUpload:
        # Supabase signed upload URLs have a fixed lifetime; expires_in is ignored
        try:
            result = self._bucket().create_signed_upload_url(key)
        except Exception as e:
            logger.error(f"Failed to create signed upload for {key}: {e}")
            raise StorageOperationError("sign upload", str(e))
        url = result.get("signed_url") or result.get("signedUrl") or result.get("signedURL")
        return SignedUpload(key=key, url=url, token=result.get("token"))

    def exists(self, key: str) -> bool:
        folder, _, filename = key.rpartition("/")
        try:
            entries = self._bucket().list(folder, {"search": filename, "limit": 100}) or []
        except Exception as e:
            raise StorageOperationError("lookup", str(e))
        return any(entry.get("name") == filename for entry in entries)

    def ping(self) -> None:
        self._supabase.raw.storage.get_bucket(self.bucket)


# =============================================================================
# AWS S3
# =============================================================================

class S3ObjectStore(ObjectStore):
    """S3 bucket accessed through a boto3 client."""

    backend = "s3"

    def __init__(self, s3_client, bucket: str, public_base_url: str = ""):
        self._s3 = s3_client
        self.bucket = bucket
        self.public_base_url = (public_base_url or f"https://{bucket}.s3.amazonaws.com").rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> S3ObjectStore:
        client = boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
            config=Config(signature_version="s3v4"),
        )
        return cls(client, settings.MEDIA_BUCKET, settings.S3_PUBLIC_BASE_URL)

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        try:
            self._s3.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed: {e}")
            raise StorageUploadError(str(e))

        logger.info(f"Uploaded file to S3: {key}")
        return key

    def delete(self, key: str) -> bool:
        try:
            self._s3.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete S3 object {key}: {e}")
            return False

        logger.info(f"Deleted file from S3: {key}")
        return True

    def list(self, folder: str, limit: int) -> list[StoredObject]:
        try:
            response = self._s3.list_objects_v2(
                Bucket=self.bucket,
                Prefix=f"{folder}/",
                Delimiter="/",
                MaxKeys=limit,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to list S3 prefix {folder}: {e}")
            raise StorageOperationError("list", str(e))

        objects = [
            StoredObject(
                key=item["Key"],
                size_bytes=item.get("Size"),
                last_modified=_parse_timestamp(item.get("LastModified")),
            )
            for item in response.get("Contents", [])
            if not item["Key"].endswith("/")
        ]
        objects.sort(key=lambda o: o.last_modified.timestamp() if o.last_modified else 0, reverse=True)
        return objects

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def signed_url(self, key: str, expires_in: int) -> str:
        try:
            return self._s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageOperationError("sign", str(e))

    def signed_upload(self, key: str, expires_in: int) -> SignedUpload:
        try:
            url = self._s3.generate_presigned_url(
                "put_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            raise StorageOperationError("sign upload", str(e))
        return SignedUpload(key=key, url=url)

    def exists(self, key: str) -> bool:
        try:
            self._s3.head_object(Bucket=self.bucket, Key=key)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound"):
                return False
            raise StorageOperationError("lookup", str(e))

    def ping(self) -> None:
        self._s3.head_bucket(Bucket=self.bucket)


def create_object_store(settings: Settings, supabase: SupabaseClient) -> ObjectStore:
    """Build the object store selected by STORAGE_BACKEND."""
    if settings.STORAGE_BACKEND == "s3":
        store = S3ObjectStore.from_settings(settings)
    else:
        store = SupabaseObjectStore(supabase, settings.MEDIA_BUCKET)
    logger.info(f"Object store: {store.backend} bucket={store.bucket}")
    return store
