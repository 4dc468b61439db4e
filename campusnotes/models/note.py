"""
CampusNotes Backend — Note Record Model
=========================================

What:  Pydantic model for the single persisted entity, the note record.
How:   Python attributes are snake_case; the JSON representation (API responses
       and the backing file) uses camelCase aliases such as `fileUrl` and
       `publicId`, matching the documents older clients already read.
Who:   Built by NoteService on upload, persisted by the NoteStore implementations.

Record layout (as stored):
    {
        "id": "3f2a9c0e...",
        "title": "Syllabus",
        "subject": "Physics",
        "desc": "",
        "type": "note",
        "fileName": "syllabus.pdf",
        "fileUrl": "https://res.cloudinary.com/.../syllabus.pdf",
        "publicId": "campusnotes/notes/1700000000000_3f2a9c0e_syllabus",
        "fileType": "application/pdf",
        "fileSize": 48213,
        "createdAt": "2024-01-15T12:00:00Z"
    }
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

DEFAULT_NOTE_TYPE = "note"


def new_note_id() -> str:
    """Random 32-char hex id; unique even with concurrent uploads."""
    return uuid.uuid4().hex


class NoteRecord(BaseModel):
    """
    Metadata describing one uploaded file.

    Lifecycle:
        absent → uploading (blob upload in flight, nothing persisted)
        → present (stored by NoteStore.add) → absent (NoteStore.remove)
    There is no update transition; records are immutable once stored.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        # Keys written by other clients survive a rewrite of the file
        extra="allow",
    )

    id: str = Field(default_factory=new_note_id, min_length=1)
    title: str = Field(min_length=1)
    subject: str = ""
    desc: str = ""
    type: str = DEFAULT_NOTE_TYPE
    file_name: str = ""
    file_url: Optional[str] = None
    # Remote blob identifier; a record without one has nothing to destroy
    public_id: Optional[str] = None
    file_type: str = "application/octet-stream"
    file_size: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Naive timestamps are taken as UTC so records always compare."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def resource_type(self) -> str:
        """Cloudinary resource type the blob was uploaded under."""
        return resource_type_for(self.type)

    def to_document(self) -> dict:
        """JSON-ready dict with camelCase keys, as written to the backing file."""
        return self.model_dump(by_alias=True, mode="json")

    def __repr__(self) -> str:
        return f"<NoteRecord(id={self.id}, title='{self.title}', type='{self.type}')>"


def resource_type_for(note_type: Optional[str]) -> str:
    """Images are stored as Cloudinary images; everything else as raw files."""
    return "image" if note_type == "image" else "raw"
