"""
CampusNotes Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── data_file: Path of a not-yet-existing backing file in tmp_path
    ├── note_store: JsonNoteStore over data_file
    ├── blob_store: In-memory FakeBlobStore (no network)
    ├── note_service: NoteService wired to the two stores above
    ├── make_record: Factory for NoteRecord test data
    └── test_client: HTTPX AsyncClient talking to a fresh app
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Override settings for testing BEFORE any app imports
os.environ["DATA_FILE"] = os.path.join(
    tempfile.mkdtemp(prefix="campusnotes_test_"), "notes-data.json"
)
os.environ["CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["CLOUDINARY_API_KEY"] = "test-key-not-real"
os.environ["CLOUDINARY_API_SECRET"] = "test-secret-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from campusnotes.exceptions import BlobStoreError  # noqa: E402
from campusnotes.models.note import NoteRecord  # noqa: E402
from campusnotes.services.blob_base import BlobStore, BlobUploadResult  # noqa: E402
from campusnotes.services.json_store import JsonNoteStore  # noqa: E402
from campusnotes.services.note_service import NoteService  # noqa: E402


class FakeBlobStore(BlobStore):
    """
    In-memory stand-in for the media host.

    Records every call so tests can assert on folders, resource types and
    ids. Set `fail_upload` / `fail_destroy` to simulate remote failures.
    """

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.uploads: List[dict] = []
        self.destroyed: List[Tuple[str, str]] = []
        self.fail_upload = False
        self.fail_destroy = False

    async def upload(
        self,
        content: bytes,
        *,
        resource_type: str,
        folder: str,
        public_id: Optional[str] = None,
    ) -> BlobUploadResult:
        if self.fail_upload:
            raise BlobStoreError(message="Upload failed: simulated outage")
        stored_id = f"{folder}/{public_id or f'auto{len(self.uploads)}'}"
        self.uploads.append(
            {"resource_type": resource_type, "folder": folder, "public_id": public_id}
        )
        self.blobs[stored_id] = content
        return BlobUploadResult(
            secure_url=f"https://res.example.com/{resource_type}/upload/{stored_id}",
            public_id=stored_id,
        )

    async def destroy(self, public_id: str, *, resource_type: str) -> None:
        if self.fail_destroy:
            raise BlobStoreError(message="Delete failed: simulated outage")
        self.destroyed.append((public_id, resource_type))
        self.blobs.pop(public_id, None)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "notes-data.json"


@pytest.fixture
def note_store(data_file):
    return JsonNoteStore(data_file)


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def note_service(note_store, blob_store):
    return NoteService(store=note_store, blob_store=blob_store, max_upload_size=1024)


@pytest.fixture
def make_record():
    """
    Factory for NoteRecord instances.

    Usage:
        record = make_record(title="Syllabus", minutes_ago=5)
    """
    base = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def _make(title: str = "Lecture 1", minutes_ago: int = 0, **overrides) -> NoteRecord:
        fields = {
            "title": title,
            "subject": "Physics",
            "desc": "Kinematics",
            "type": "note",
            "file_name": "lecture1.pdf",
            "file_url": "https://res.example.com/raw/upload/campusnotes/notes/lecture1",
            "public_id": "campusnotes/notes/lecture1",
            "file_type": "application/pdf",
            "file_size": 2048,
            "created_at": base - timedelta(minutes=minutes_ago),
        }
        fields.update(overrides)
        return NoteRecord(**fields)

    return _make


@pytest_asyncio.fixture
async def test_client(note_store, blob_store):
    """
    HTTPX AsyncClient routed straight to a fresh app instance.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    from campusnotes.config import Settings
    from campusnotes.main import create_app

    app = create_app(
        config=Settings(max_upload_size=1024),
        note_store=note_store,
        blob_store=blob_store,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
