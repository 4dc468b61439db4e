"""
CampusNotes Backend — Note Service Unit Tests
===============================================

What:  Tests for NoteService business logic (upload, list, get, delete).
How:   Real JsonNoteStore in tmp_path plus the in-memory FakeBlobStore
       (no network); a mocked store where a failure has to be forced.

What we test:
    ✅ Upload validation rejects before any blob call
    ✅ Successful upload builds and persists the record
    ✅ Blob upload failure stores nothing
    ✅ Delete destroys the blob best-effort and always removes the record
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from campusnotes.exceptions import (
    BlobStoreError,
    FileStorageError,
    NotFoundError,
    ValidationError,
)
from campusnotes.services.note_service import NoteService


def upload_kwargs(**overrides):
    kwargs = {
        "filename": "syllabus.pdf",
        "content": b"%PDF-1.4 fake",
        "content_type": "application/pdf",
        "title": "Syllabus",
        "subject": None,
        "desc": None,
        "note_type": None,
    }
    kwargs.update(overrides)
    return kwargs


class TestUploadValidation:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", [None, "", "   "])
    async def test_missing_title_rejected(self, note_service, blob_store, note_store, title):
        with pytest.raises(ValidationError) as exc_info:
            await note_service.upload_note(**upload_kwargs(title=title))

        assert exc_info.value.field == "title"
        assert blob_store.uploads == []
        assert await note_store.list() == []

    @pytest.mark.asyncio
    async def test_missing_file_rejected(self, note_service, blob_store, note_store):
        with pytest.raises(ValidationError) as exc_info:
            await note_service.upload_note(**upload_kwargs(filename=None, content=None))

        assert exc_info.value.field == "file"
        assert blob_store.uploads == []
        assert await note_store.list() == []

    @pytest.mark.asyncio
    async def test_oversized_file_rejected(self, note_service, blob_store):
        # note_service fixture caps uploads at 1024 bytes
        with pytest.raises(ValidationError, match="exceeds maximum"):
            await note_service.upload_note(**upload_kwargs(content=b"x" * 1025))

        assert blob_store.uploads == []

    def test_file_at_limit_accepted(self, note_service):
        note_service.validate_upload("a.pdf", b"x" * 1024, "Title")

    def test_declared_size_checked_without_content(self, note_service):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            note_service.check_upload("huge.bin", 5 * 1024 ** 3, "Title")

    def test_unknown_declared_size_skips_size_check(self, note_service):
        note_service.check_upload("a.pdf", None, "Title")

    def test_title_checked_before_declared_size(self, note_service):
        with pytest.raises(ValidationError) as exc_info:
            note_service.check_upload("huge.bin", 5 * 1024 ** 3, "  ")

        assert exc_info.value.field == "title"


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_persists_record(self, note_service, note_store, blob_store):
        record = await note_service.upload_note(
            **upload_kwargs(title="  Syllabus ", subject=" Physics ", desc=" Week 1 ")
        )

        assert record.title == "Syllabus"
        assert record.subject == "Physics"
        assert record.desc == "Week 1"
        assert record.type == "note"
        assert record.file_name == "syllabus.pdf"
        assert record.file_type == "application/pdf"
        assert record.file_size == len(b"%PDF-1.4 fake")
        assert record.file_url
        assert record.public_id in blob_store.blobs

        assert await note_store.find(record.id) == record

    @pytest.mark.asyncio
    async def test_default_type_uses_notes_folder_and_raw_resource(self, note_service, blob_store):
        await note_service.upload_note(**upload_kwargs())

        call = blob_store.uploads[0]
        assert call["folder"] == "campusnotes/notes"
        assert call["resource_type"] == "raw"
        assert call["public_id"].endswith("_syllabus")
        assert call["public_id"].split("_")[0].isdigit()

    @pytest.mark.asyncio
    async def test_image_type_uses_image_resource(self, note_service, blob_store):
        record = await note_service.upload_note(
            **upload_kwargs(filename="board.jpg", content_type="image/jpeg", note_type="image")
        )

        call = blob_store.uploads[0]
        assert call["folder"] == "campusnotes/image"
        assert call["resource_type"] == "image"
        assert record.type == "image"

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, note_service):
        first = await note_service.upload_note(**upload_kwargs())
        second = await note_service.upload_note(**upload_kwargs())

        assert first.id != second.id

    def test_public_ids_differ_within_one_millisecond(self):
        with patch("campusnotes.services.note_service.time.time", return_value=1_700_000_000.0):
            first = NoteService.blob_public_id("syllabus.pdf")
            second = NoteService.blob_public_id("syllabus.pdf")

        assert first != second
        assert first.startswith("1700000000000_")

    @pytest.mark.asyncio
    async def test_concurrent_same_name_uploads_own_separate_blobs(self, note_service, blob_store, note_store):
        """Deleting one of two same-name uploads must leave the other's file alone."""
        with patch("campusnotes.services.note_service.time.time", return_value=1_700_000_000.0):
            first, second = await asyncio.gather(
                note_service.upload_note(**upload_kwargs()),
                note_service.upload_note(**upload_kwargs()),
            )

        assert first.public_id != second.public_id
        assert len(blob_store.blobs) == 2

        await note_service.delete_note(first.id)

        assert second.public_id in blob_store.blobs
        assert await note_store.find(second.id) == second

    @pytest.mark.asyncio
    async def test_blob_failure_stores_nothing(self, note_service, blob_store, note_store):
        blob_store.fail_upload = True

        with pytest.raises(BlobStoreError):
            await note_service.upload_note(**upload_kwargs())

        assert await note_store.list() == []

    @pytest.mark.asyncio
    async def test_store_failure_propagates_after_blob_upload(self, blob_store):
        store = AsyncMock()
        store.add.side_effect = FileStorageError()
        service = NoteService(store=store, blob_store=blob_store)

        with pytest.raises(FileStorageError):
            await service.upload_note(**upload_kwargs())

        # No compensating destroy: the blob stays behind
        assert len(blob_store.blobs) == 1
        assert blob_store.destroyed == []


class TestGetAndList:

    @pytest.mark.asyncio
    async def test_get_unknown_note_raises(self, note_service):
        with pytest.raises(NotFoundError):
            await note_service.get_note("missing")

    @pytest.mark.asyncio
    async def test_list_newest_first(self, note_service, note_store, make_record):
        await note_store.add(make_record(title="Old", minutes_ago=30))
        await note_store.add(make_record(title="New", minutes_ago=0))

        titles = [n.title for n in await note_service.list_notes()]
        assert titles == ["New", "Old"]


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_destroys_blob_and_removes_record(self, note_service, note_store, blob_store):
        record = await note_service.upload_note(**upload_kwargs())

        deleted = await note_service.delete_note(record.id)

        assert deleted.id == record.id
        assert blob_store.destroyed == [(record.public_id, "raw")]
        assert await note_store.find(record.id) is None

    @pytest.mark.asyncio
    async def test_delete_image_uses_image_resource_type(self, note_service, note_store, blob_store, make_record):
        record = make_record(type="image", public_id="campusnotes/image/1_board")
        await note_store.add(record)

        await note_service.delete_note(record.id)

        assert blob_store.destroyed == [("campusnotes/image/1_board", "image")]

    @pytest.mark.asyncio
    async def test_delete_without_public_id_skips_blob(self, note_service, note_store, blob_store, make_record):
        record = make_record(public_id=None)
        await note_store.add(record)

        await note_service.delete_note(record.id)

        assert blob_store.destroyed == []
        assert await note_store.list() == []

    @pytest.mark.asyncio
    async def test_blob_destroy_failure_still_removes_record(self, note_service, note_store, blob_store, make_record):
        record = make_record()
        await note_store.add(record)
        blob_store.fail_destroy = True

        await note_service.delete_note(record.id)

        assert await note_store.find(record.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_note_raises(self, note_service, blob_store):
        with pytest.raises(NotFoundError):
            await note_service.delete_note("missing")

        assert blob_store.destroyed == []
