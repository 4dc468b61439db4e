"""
CampusNotes Backend — Custom Exception Hierarchy
==================================================

What:  Failure types raised by the note store, the blob store and NoteService.
How:   Every error has a client-safe `message` and a `context` dict that only
       reaches the server log. main.register_exception_handlers() maps each
       class to a status code and the JSON error body.

Exception Hierarchy:
    CampusNotesError (base)
    ├── ValidationError          → 400 (missing file/title, file too large)
    ├── NotFoundError            → 404 (unknown note id)
    ├── ConflictError            → 409 (duplicate note id on add)
    ├── FileStorageError         → 500 (backing file could not be written)
    │   └── StoreUnavailableError → 500 (backing file unreadable or corrupt)
    └── BlobStoreError           → 500 (media host upload/destroy failed)
"""

from typing import Any, Dict, Optional


class CampusNotesError(Exception):
    """
    Root of the application's errors.

    Subclasses that only need a different wording override `default_message`
    instead of redefining __init__.
    """

    default_message = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.context = dict(context or {})
        super().__init__(self.message)


class ValidationError(CampusNotesError):
    """
    An upload request the service refuses before touching either store.

    `field` names the offending form field ("file" or "title") and is
    echoed to the client under `details`.
    """

    default_message = "Validation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.field = field
        if field:
            self.context["field"] = field


class NotFoundError(CampusNotesError):
    """The store answered None for a lookup by id."""

    def __init__(
        self,
        resource: str = "note",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if resource_id:
            message = f"{resource.capitalize()} '{resource_id}' not found"
        else:
            message = f"{resource.capitalize()} not found"
        super().__init__(message=message, context=context)
        self.context.update(resource=resource, resource_id=resource_id)


class ConflictError(CampusNotesError):
    default_message = "A note with this ID already exists"


class FileStorageError(CampusNotesError):
    """
    The backing JSON file could not be created or rewritten.

    The path and OS error travel in `context`; clients see only `message`.
    """

    default_message = "Failed to save note metadata"


class StoreUnavailableError(FileStorageError):
    """
    The note collection could not be loaded.

    Raised for an unreadable file, invalid JSON, a document that is not an
    array, or a record that fails validation. An absent or blank file is an
    empty collection, not this error.
    """

    default_message = "The note store is currently unavailable"


class BlobStoreError(CampusNotesError):
    """The media host rejected or failed an upload or destroy. Never retried."""

    default_message = "Remote file storage operation failed"
