"""
CampusNotes Backend — Abstract Note Store Interface
=====================================================

What:  Abstract base class defining the contract for note record persistence.
How:   Concrete stores inherit from NoteStore and implement every method.
       NoteService and the routes only ever see this interface, so the backing
       mechanism (flat JSON file today) can change without touching them.
Who:   Called by NoteService for every list/upload/get/delete operation.

Implementations:
    - JsonNoteStore: whole-collection read/write over a single JSON array file
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from campusnotes.models.note import NoteRecord


class NoteStore(ABC):
    """
    Abstract interface for the note record collection.

    Contract:
        - Record ids are unique across the collection at all times
        - list() orders records by created_at, newest first
        - Mutations are serialized; concurrent add/remove never lose updates
        - An unreadable backing store raises StoreUnavailableError, it is
          never reported as an empty collection
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Create the backing storage if it does not exist yet.

        Idempotent: safe to call on every process start and before every
        operation.
        """
        ...

    @abstractmethod
    async def list(self) -> List[NoteRecord]:
        """
        Return every stored record, newest first.

        Raises:
            StoreUnavailableError: The collection could not be loaded.
        """
        ...

    @abstractmethod
    async def add(self, record: NoteRecord) -> NoteRecord:
        """
        Persist a new record and return it as stored.

        Raises:
            ConflictError: A record with the same id already exists.
            StoreUnavailableError: The existing collection could not be loaded.
            FileStorageError: The updated collection could not be written.
        """
        ...

    @abstractmethod
    async def find(self, note_id: str) -> Optional[NoteRecord]:
        """Return the record with the given id, or None when absent."""
        ...

    @abstractmethod
    async def remove(self, note_id: str) -> bool:
        """
        Delete the record with the given id.

        Returns:
            True if a record was removed; False when the id was absent
            (the collection is left untouched in that case).
        """
        ...
