"""
CampusNotes Backend — JSON File Note Store
============================================

What:  NoteStore backed by a single pretty-printed JSON array on disk.
How:   Every operation re-reads the whole file (no in-memory cache between
       calls); every mutation rewrites the whole file. Writes go to a uniquely
       named sibling temp file (tempfile.mkstemp) that is then renamed over
       the existing one, so a reader never sees a half-written array.
Who:   Constructed once by create_app() and shared through app.state.

Write discipline:
    The bootstrap and all read-modify-write cycles (add, remove) run under
    one asyncio.Lock per store instance. Two uploads racing each other, or
    a delete racing an upload, are applied one after the other:

        add(r1) ──lock── read [..] → append r1 → write ──unlock──
        add(r2)                                          ──lock── read [.., r1] → append r2 → write

    The lock covers a single process. Several processes pointed at the same
    file are not coordinated.

Failure modes:
    - File absent: bootstrapped to [] (initialize)
    - File blank: read as an empty collection
    - Unreadable / invalid JSON / not an array / invalid record:
      StoreUnavailableError, distinct from "empty"
    - Write failure: FileStorageError (the previous file is left intact)
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

import aiofiles
import aiofiles.os
from pydantic import ValidationError as PydanticValidationError

from campusnotes.exceptions import ConflictError, FileStorageError, StoreUnavailableError
from campusnotes.models.note import NoteRecord
from campusnotes.services.store_base import NoteStore

logger = logging.getLogger(__name__)


class JsonNoteStore(NoteStore):
    """
    Note collection persisted as one JSON array file.

    File format (indent=2, UTF-8):
        [
          {
            "id": "...",
            "title": "...",
            ...
          }
        ]
    """

    def __init__(self, path: Union[str, Path]):
        """
        Args:
            path: Location of the backing file. Nothing is touched on disk
                  until initialize() or the first operation.
        """
        self.path = Path(path).resolve()
        self._write_lock = asyncio.Lock()
        self._initialized = False

    # ── Bootstrap ─────────────────────────────────────────────────────────

    async def initialize(self) -> None:
        if self._initialized and self.path.exists():
            return
        async with self._write_lock:
            # Re-checked under the lock: a concurrent add may have created it
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                if not await aiofiles.os.path.exists(self.path):
                    await self._write_records([])
                    logger.info("Created note store at %s", self.path)
            except OSError as e:
                logger.error("Failed to bootstrap note store at %s: %s", self.path, str(e))
                raise FileStorageError(
                    message="Could not initialize the note store.",
                    context={"path": str(self.path), "os_error": str(e)},
                )
            self._initialized = True

    # ── Raw file access ───────────────────────────────────────────────────

    async def _read_records(self) -> List[NoteRecord]:
        """
        Load and validate the whole collection in file order.

        Raises:
            StoreUnavailableError for any read, parse or validation failure.
        """
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Failed to read note store %s: %s", self.path, str(e))
            raise StoreUnavailableError(
                context={"path": str(self.path), "os_error": str(e)},
            )

        if not raw.strip():
            return []

        try:
            documents = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error("Note store %s is not valid JSON: %s", self.path, str(e))
            raise StoreUnavailableError(
                context={"path": str(self.path), "parse_error": str(e)},
            )

        if not isinstance(documents, list):
            logger.error(
                "Note store %s holds a %s instead of an array",
                self.path,
                type(documents).__name__,
            )
            raise StoreUnavailableError(
                context={"path": str(self.path), "document_type": type(documents).__name__},
            )

        try:
            return [NoteRecord.model_validate(doc) for doc in documents]
        except PydanticValidationError as e:
            logger.error("Note store %s holds an invalid record: %s", self.path, str(e))
            raise StoreUnavailableError(
                context={"path": str(self.path), "validation_errors": e.error_count()},
            )

    async def _write_records(self, records: List[NoteRecord]) -> None:
        """
        Replace the backing file with the given collection.

        Raises:
            FileStorageError if the temp file cannot be written or renamed.
        """
        payload = json.dumps(
            [record.to_document() for record in records],
            indent=2,
            ensure_ascii=False,
        )
        tmp_path: Optional[str] = None

        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            os.close(fd)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to write note store %s: %s", self.path, str(e))
            if tmp_path is not None and await aiofiles.os.path.exists(tmp_path):
                await aiofiles.os.remove(tmp_path)
            raise FileStorageError(
                message="Failed to save note metadata. Please try again.",
                context={"path": str(self.path), "os_error": str(e)},
            )

    # ── NoteStore API ─────────────────────────────────────────────────────

    async def list(self) -> List[NoteRecord]:
        await self.initialize()
        records = await self._read_records()
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    async def add(self, record: NoteRecord) -> NoteRecord:
        await self.initialize()
        async with self._write_lock:
            records = await self._read_records()
            if any(existing.id == record.id for existing in records):
                raise ConflictError(context={"note_id": record.id})
            records.append(record)
            await self._write_records(records)

        logger.info("Stored note %s (%d records)", record.id, len(records))
        return record

    async def find(self, note_id: str) -> Optional[NoteRecord]:
        await self.initialize()
        for record in await self._read_records():
            if record.id == note_id:
                return record
        return None

    async def remove(self, note_id: str) -> bool:
        await self.initialize()
        async with self._write_lock:
            records = await self._read_records()
            remaining = [r for r in records if r.id != note_id]
            if len(remaining) == len(records):
                logger.debug("Remove: note %s not in store", note_id)
                return False
            await self._write_records(remaining)

        logger.info("Removed note %s (%d records left)", note_id, len(remaining))
        return True
