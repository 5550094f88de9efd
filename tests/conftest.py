# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabase: in-memory stand-in for the supabase-py query builder
# - FakeObjectStore: in-memory object store
# - EmailSpy: records inquiry emails instead of sending them
# - An API client with the backend providers overridden
# =============================================================================

import copy
import os
import time
import uuid
from types import SimpleNamespace

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
for _key in ("SMTP_USER", "SMTP_PASSWORD", "ADMIN_EMAILS", "STORAGE_BACKEND"):
    os.environ.pop(_key, None)

import pytest
from jose import jwt

from core.models.media import MediaKind
from core.services.media_service import MediaService
from core.services.storage_service import ObjectStore, SignedUpload, StoredObject
from lib.supabase_client import SupabaseClient


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeQuery:
    """Chainable query mirroring the supabase-py builder calls we use."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.op = "select"
        self.payload = None
        self.on_conflict = "id"
        self.filters: list[tuple[str, object]] = []
        self.order_by = None
        self.descending = False
        self.row_limit = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, data):
        self.op, self.payload = "insert", data
        return self

    def update(self, data):
        self.op, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict="id"):
        self.op, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by, self.descending = column, desc
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row):
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self):
        self.db.calls.append((self.table_name, self.op))
        if (self.table_name, self.op) in self.db.failures:
            raise Exception(f"{self.op} on {self.table_name} failed")

        rows = self.db.tables.setdefault(self.table_name, [])

        if self.op == "select":
            result = [row for row in rows if self._matches(row)]
            if self.order_by:
                result.sort(key=lambda r: str(r.get(self.order_by) or ""), reverse=self.descending)
            if self.row_limit:
                result = result[:self.row_limit]
            return SimpleNamespace(data=copy.deepcopy(result))

        if self.op == "insert":
            row = {"id": str(uuid.uuid4()), **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        if self.op == "upsert":
            key = self.payload.get(self.on_conflict)
            for row in rows:
                if key is not None and row.get(self.on_conflict) == key:
                    row.update(self.payload)
                    return SimpleNamespace(data=[copy.deepcopy(row)])
            row = {"id": str(uuid.uuid4()), **self.payload}
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])

        if self.op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(copy.deepcopy(row))
            return SimpleNamespace(data=updated)

        if self.op == "delete":
            deleted = [row for row in rows if self._matches(row)]
            self.db.tables[self.table_name] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(deleted))

        raise AssertionError(f"unsupported op {self.op}")


class FakeSupabase:
    """
    In-memory tables behind the supabase-py `client.table(...)` API.

    failures: set of (table, op) pairs whose execute() raises.
    """

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.failures: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.get(name, [])

    def seed(self, name, /, **row):
        row.setdefault("id", str(uuid.uuid4()))
        self.tables.setdefault(name, []).append(row)
        return row


# =============================================================================
# Fake Object Store
# =============================================================================

class FakeObjectStore(ObjectStore):
    """
    Dict-backed object store.

    fail_uploads: keys (or "*") whose upload raises StorageUploadError
    fail_deletes: when True, delete() reports failure and keeps the object
    """

    backend = "memory"

    def __init__(self):
        self.bucket = "media"
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.fail_uploads: set[str] = set()
        self.fail_deletes = False
        self.deleted: list[str] = []

    def upload(self, key, content, content_type):
        from app.exceptions import StorageUploadError

        if "*" in self.fail_uploads or key in self.fail_uploads:
            raise StorageUploadError("simulated outage")
        self.objects[key] = (content, content_type)
        return key

    def delete(self, key):
        if self.fail_deletes:
            return False
        self.objects.pop(key, None)
        self.deleted.append(key)
        return True

    def list(self, folder, limit):
        keys = [
            key for key in reversed(list(self.objects))
            if key.startswith(f"{folder}/") and "/" not in key[len(folder) + 1:]
        ]
        return [
            StoredObject(key=key, size_bytes=len(self.objects[key][0]), content_type=self.objects[key][1])
            for key in keys[:limit]
        ]

    def public_url(self, key):
        return f"https://cdn.test/media/{key}"

    def signed_url(self, key, expires_in):
        return f"https://cdn.test/media/{key}?expires={expires_in}"

    def signed_upload(self, key, expires_in):
        return SignedUpload(key=key, url=f"https://cdn.test/upload/{key}", token="upload-token")

    def exists(self, key):
        return key in self.objects

    def ping(self):
        return None


# =============================================================================
# Email Spy
# =============================================================================

class EmailSpy:
    """Records inquiry emails; set `fail` to make delivery raise."""

    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    def send_inquiry_emails(self, inquiry):
        from app.exceptions import EmailDeliveryError

        if self.fail:
            raise EmailDeliveryError("smtp down")
        self.sent.append(inquiry)
        return True

    def notify_in_background(self, inquiry):
        from app.exceptions import EmailDeliveryError

        try:
            self.send_inquiry_emails(inquiry)
        except EmailDeliveryError:
            pass


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def supabase(fake_db):
    """SupabaseClient wrapper over the in-memory tables."""
    return SupabaseClient(fake_db)


@pytest.fixture
def object_store():
    return FakeObjectStore()


@pytest.fixture
def email_spy():
    return EmailSpy()


@pytest.fixture
def photo_service(supabase, object_store):
    return MediaService(
        supabase,
        object_store,
        MediaKind.PHOTO,
        allowed_extensions=[".jpg", ".jpeg", ".png"],
        max_bytes=1024,
        max_results=500,
    )


@pytest.fixture
def video_service(supabase, object_store):
    return MediaService(
        supabase,
        object_store,
        MediaKind.VIDEO,
        allowed_extensions=[".mp4", ".mov"],
        max_bytes=4096,
        max_results=500,
        signed_url_ttl=600,
    )


@pytest.fixture
def sample_inquiry():
    """A valid contact form payload."""
    return {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "mobile": "9876543210",
        "address": "Pune",
        "course": "Kathak Course",
        "mode": "offline",
    }


def make_token(email="admin@academy.com", expires_in=3600, secret=None, **claims):
    """Sign a Supabase-style access token with the test JWT secret."""
    from app.config import settings

    payload = {
        "sub": str(uuid.uuid4()),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "iat": int(time.time()),
        "exp": int(time.time()) + expires_in,
        **claims,
    }
    return jwt.encode(payload, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def api_client(fake_db, object_store, email_spy):
    """
    TestClient with the backend providers overridden.

    Used without a `with` block so the lifespan (which connects to the real
    backends) does not run.
    """
    from fastapi.testclient import TestClient

    from app.dependencies import get_email_service, get_object_store, get_supabase_client
    from app.main import app

    app.dependency_overrides[get_supabase_client] = lambda: SupabaseClient(fake_db)
    app.dependency_overrides[get_object_store] = lambda: object_store
    app.dependency_overrides[get_email_service] = lambda: email_spy

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
