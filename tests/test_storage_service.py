# =============================================================================
# tests/test_storage_service.py - Object Store Backend Tests
# =============================================================================
# Both backends are tested against MagicMock SDK clients; no network.
# =============================================================================

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from app.exceptions import StorageOperationError, StorageUploadError
from core.services.storage_service import S3ObjectStore, SupabaseObjectStore, create_object_store
from lib.supabase_client import SupabaseClient


def client_error(code):
    return ClientError({"Error": {"Code": code, "Message": code}}, "Operation")


# =============================================================================
# Supabase Storage
# =============================================================================

class TestSupabaseObjectStore:
    """Supabase Storage bucket through supabase-py."""

    @pytest.fixture
    def bucket(self):
        return MagicMock()

    @pytest.fixture
    def store(self, bucket):
        raw = MagicMock()
        raw.storage.from_.return_value = bucket
        return SupabaseObjectStore(SupabaseClient(raw), "media")

    def test_upload_replaces_existing(self, store, bucket):
        store.upload("photos/a.jpg", b"data", "image/jpeg")

        kwargs = bucket.upload.call_args.kwargs
        assert kwargs["path"] == "photos/a.jpg"
        assert kwargs["file_options"] == {"content-type": "image/jpeg", "upsert": "true"}

    def test_upload_failure(self, store, bucket):
        bucket.upload.side_effect = Exception("bucket not found")

        with pytest.raises(StorageUploadError):
            store.upload("photos/a.jpg", b"data", "image/jpeg")

    def test_delete_failure_reported(self, store, bucket):
        bucket.remove.side_effect = Exception("network")

        assert store.delete("photos/a.jpg") is False

    def test_list_skips_folders(self, store, bucket):
        bucket.list.return_value = [
            {"id": None, "name": "thumbnails"},
            {
                "id": "1",
                "name": "a.mp4",
                "created_at": "2024-05-01T10:00:00Z",
                "metadata": {"size": 42, "mimetype": "video/mp4"},
            },
        ]

        objects = store.list("videos", 500)

        assert [o.key for o in objects] == ["videos/a.mp4"]
        assert objects[0].size_bytes == 42
        assert objects[0].last_modified == datetime(2024, 5, 1, 10, tzinfo=timezone.utc)

    def test_list_failure(self, store, bucket):
        bucket.list.side_effect = Exception("denied")

        with pytest.raises(StorageOperationError):
            store.list("photos", 500)

    def test_signed_url(self, store, bucket):
        bucket.create_signed_url.return_value = {"signedURL": "https://signed"}

        assert store.signed_url("videos/a.mp4", 60) == "https://signed"
        bucket.create_signed_url.assert_called_once_with("videos/a.mp4", 60)

    def test_exists(self, store, bucket):
        bucket.list.return_value = [{"id": "1", "name": "a.mp4"}]

        assert store.exists("videos/a.mp4") is True
        assert store.exists("videos/b.mp4") is False


# =============================================================================
# S3
# =============================================================================

class TestS3ObjectStore:
    """S3 bucket through boto3."""

    @pytest.fixture
    def s3(self):
        return MagicMock()

    @pytest.fixture
    def store(self, s3):
        return S3ObjectStore(s3, "academy-media", "https://media.example.com/")

    def test_upload(self, store, s3):
        store.upload("photos/a.jpg", b"data", "image/jpeg")

        s3.put_object.assert_called_once_with(
            Bucket="academy-media",
            Key="photos/a.jpg",
            Body=b"data",
            ContentType="image/jpeg",
        )

    def test_upload_failure(self, store, s3):
        s3.put_object.side_effect = client_error("AccessDenied")

        with pytest.raises(StorageUploadError):
            store.upload("photos/a.jpg", b"data", "image/jpeg")

    def test_delete_failure_reported(self, store, s3):
        s3.delete_object.side_effect = client_error("AccessDenied")

        assert store.delete("photos/a.jpg") is False

    def test_public_url(self, store):
        assert store.public_url("photos/a.jpg") == "https://media.example.com/photos/a.jpg"

    def test_default_public_url(self, s3):
        store = S3ObjectStore(s3, "academy-media")

        assert store.public_url("x.jpg") == "https://academy-media.s3.amazonaws.com/x.jpg"

    def test_list_newest_first(self, store, s3):
        s3.list_objects_v2.return_value = {
            "Contents": [
                {"Key": "photos/old.jpg", "Size": 1, "LastModified": datetime(2024, 1, 1, tzinfo=timezone.utc)},
                {"Key": "photos/", "Size": 0},
                {"Key": "photos/new.jpg", "Size": 2, "LastModified": datetime(2024, 6, 1, tzinfo=timezone.utc)},
            ]
        }

        objects = store.list("photos", 500)

        assert [o.key for o in objects] == ["photos/new.jpg", "photos/old.jpg"]
        kwargs = s3.list_objects_v2.call_args.kwargs
        assert kwargs["Prefix"] == "photos/"
        assert kwargs["MaxKeys"] == 500

    def test_exists_handles_404(self, store, s3):
        s3.head_object.side_effect = client_error("404")

        assert store.exists("videos/a.mp4") is False

    def test_exists_other_errors_raise(self, store, s3):
        s3.head_object.side_effect = client_error("403")

        with pytest.raises(StorageOperationError):
            store.exists("videos/a.mp4")

    def test_signed_upload_uses_put(self, store, s3):
        s3.generate_presigned_url.return_value = "https://put"

        signed = store.signed_upload("videos/a.mp4", 900)

        assert signed.url == "https://put"
        assert s3.generate_presigned_url.call_args.args[0] == "put_object"


class TestCreateObjectStore:
    def test_default_backend_is_supabase(self):
        settings = MagicMock(STORAGE_BACKEND="supabase", MEDIA_BUCKET="media")

        store = create_object_store(settings, SupabaseClient(MagicMock()))

        assert isinstance(store, SupabaseObjectStore)
        assert store.bucket == "media"
