"""
CampusNotes Backend — Note Service (Business Logic Orchestrator)
=================================================================

What:  Coordinates the upload → blob store → note store workflow, plus listing,
       lookup and deletion of note records.
How:   Composes a NoteStore and a BlobStore handed in at construction time.
Who:   Built once by create_app(); called by the route handlers.

Orchestration Flow (POST /api/upload):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Upload  │───▶│  Validate   │───▶│  BlobStore   │───▶│  NoteStore   │
    │  (Route) │    │  (title,    │    │  .upload()   │    │  .add()      │
    └──────────┘    │  file, size)│    └──────────────┘    └──────────────┘
                    └─────────────┘

    Validation failure → ValidationError, nothing uploaded, nothing stored.
    Blob upload failure → BlobStoreError, nothing stored.
    Store failure after a successful upload → the blob is left behind
    (logged with its public id); there is no compensating destroy.

Delete policy (DELETE /api/data/{id}):
    Best-effort on the remote side. If the blob cannot be destroyed the
    failure is logged and the record is removed anyway, so a user never
    sees a note they asked to delete.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from pathlib import PurePath
from typing import List, Optional

from campusnotes.exceptions import BlobStoreError, NotFoundError, ValidationError
from campusnotes.models.note import DEFAULT_NOTE_TYPE, NoteRecord, resource_type_for
from campusnotes.services.blob_base import BlobStore
from campusnotes.services.store_base import NoteStore

logger = logging.getLogger(__name__)

DEFAULT_FOLDER = "notes"


def _clean(value: Optional[str]) -> str:
    return value.strip() if value else ""


class NoteService:
    """
    Business logic layer for note operations.

    Responsibilities:
        - upload_note(): validate, push the file to the blob store, persist metadata
        - list_notes(): every record, newest first
        - get_note(): single record lookup with not-found handling
        - delete_note(): destroy the blob (best-effort) and remove the record
    """

    def __init__(
        self,
        store: NoteStore,
        blob_store: BlobStore,
        max_upload_size: int = 52_428_800,
        blob_root_folder: str = "campusnotes",
    ):
        self.store = store
        self.blob_store = blob_store
        self.max_upload_size = max_upload_size
        self.blob_root_folder = blob_root_folder.strip("/")

    # ── Validation ────────────────────────────────────────────────────────

    def check_upload(
        self,
        filename: Optional[str],
        size: Optional[int],
        title: Optional[str],
    ) -> None:
        """
        Check an upload before anything leaves the process.

        Order: file present → title present → size within max_upload_size.
        A `size` of None (not known yet) skips the size check.

        Raises:
            ValidationError (400) describing the first problem found.
        """
        if not filename:
            raise ValidationError(message="File and title are required", field="file")

        if not _clean(title):
            raise ValidationError(message="File and title are required", field="title")

        if size is not None and size > self.max_upload_size:
            max_mb = self.max_upload_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"File size ({size / (1024 * 1024):.1f}MB) "
                    f"exceeds maximum of {max_mb:.0f}MB."
                ),
                field="file",
                context={"max_size_mb": max_mb, "actual_size": size},
            )

    def validate_upload(
        self,
        filename: Optional[str],
        content: Optional[bytes],
        title: Optional[str],
    ) -> None:
        """check_upload() against the bytes actually received."""
        if content is None:
            raise ValidationError(message="File and title are required", field="file")
        self.check_upload(filename, len(content), title)

    def blob_folder(self, note_type: Optional[str]) -> str:
        """Remote folder for a note type, e.g. "campusnotes/notes"."""
        return f"{self.blob_root_folder}/{note_type or DEFAULT_FOLDER}"

    @staticmethod
    def blob_public_id(filename: str) -> str:
        """
        Caller-assigned blob id: <epoch millis>_<8 hex>_<file stem>.

        Unique per call, even for the same filename within one millisecond.
        """
        stem = PurePath(filename).name.split(".")[0] or "file"
        return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}_{stem}"

    # ── Operations ────────────────────────────────────────────────────────

    async def upload_note(
        self,
        *,
        filename: Optional[str],
        content: Optional[bytes],
        content_type: Optional[str],
        title: Optional[str],
        subject: Optional[str] = None,
        desc: Optional[str] = None,
        note_type: Optional[str] = None,
    ) -> NoteRecord:
        """
        Complete workflow: validate → upload blob → store record.

        Args:
            filename: Original name of the uploaded file part (None if missing)
            content: Raw file bytes (None if the file part is missing)
            content_type: MIME type reported for the file part
            title: Required, trimmed non-empty
            subject, desc: Optional free text, trimmed
            note_type: Category; selects the blob folder and resource type

        Returns:
            The stored NoteRecord.

        Raises:
            ValidationError: Missing file/title or file too large (no side effects)
            BlobStoreError: The media host rejected the upload
            FileStorageError: The record could not be persisted
        """
        self.validate_upload(filename, content, title)

        note_type = _clean(note_type) or None
        blob = await self.blob_store.upload(
            content,
            resource_type=resource_type_for(note_type),
            folder=self.blob_folder(note_type),
            public_id=self.blob_public_id(filename),
        )

        record = NoteRecord(
            title=_clean(title),
            subject=_clean(subject),
            desc=_clean(desc),
            type=note_type or DEFAULT_NOTE_TYPE,
            file_name=filename,
            file_url=blob.secure_url,
            public_id=blob.public_id,
            file_type=content_type or "application/octet-stream",
            file_size=len(content),
            created_at=datetime.now(timezone.utc),
        )

        try:
            await self.store.add(record)
        except Exception:
            logger.error(
                "Note metadata not saved; blob %s is orphaned",
                blob.public_id,
            )
            raise

        logger.info(
            "Note %s uploaded: %s (%d bytes, type=%s)",
            record.id,
            record.file_name,
            record.file_size,
            record.type,
        )
        return record

    async def list_notes(self) -> List[NoteRecord]:
        return await self.store.list()

    async def get_note(self, note_id: str) -> NoteRecord:
        """
        Raises:
            NotFoundError: No record with this id (→ 404)
        """
        record = await self.store.find(note_id)
        if record is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return record

    async def delete_note(self, note_id: str) -> NoteRecord:
        """
        Remove a note and, best-effort, its remote blob.

        Returns:
            The record that was deleted.

        Raises:
            NotFoundError: No record with this id (→ 404)
            FileStorageError: The updated collection could not be written
        """
        record = await self.get_note(note_id)

        if record.public_id:
            try:
                await self.blob_store.destroy(
                    record.public_id,
                    resource_type=record.resource_type,
                )
            except BlobStoreError as e:
                logger.warning(
                    "Blob %s for note %s not destroyed, removing record anyway: %s",
                    record.public_id,
                    note_id,
                    e.message,
                )

        await self.store.remove(note_id)
        logger.info("Note %s deleted", note_id)
        return record
