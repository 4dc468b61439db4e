"""
CampusNotes Backend — Abstract Blob Store Interface
=====================================================

What:  Contract for the remote media host that keeps the uploaded bytes.
How:   The host is treated as an opaque store exposing upload and destroy.
       Concrete implementations wrap a provider SDK (see cloudinary_store.py).
Who:   Called by NoteService during upload and delete.

No retry is part of the contract: a failed remote call surfaces immediately
as BlobStoreError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BlobUploadResult:
    """Location and identifier handed back by the remote host."""

    secure_url: str
    public_id: str


class BlobStore(ABC):
    """Abstract interface for remote file storage."""

    @abstractmethod
    async def upload(
        self,
        content: bytes,
        *,
        resource_type: str,
        folder: str,
        public_id: Optional[str] = None,
    ) -> BlobUploadResult:
        """
        Store `content` remotely.

        Args:
            content: Raw file bytes.
            resource_type: "image" or "raw".
            folder: Remote folder, e.g. "campusnotes/notes".
            public_id: Caller-assigned identifier; the host assigns one when None.

        Raises:
            BlobStoreError: The host rejected the upload or could not be reached.
        """
        ...

    @abstractmethod
    async def destroy(self, public_id: str, *, resource_type: str) -> None:
        """
        Delete a previously uploaded blob.

        Raises:
            BlobStoreError: The host reported a failure or could not be reached.
        """
        ...
