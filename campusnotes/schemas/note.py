"""
CampusNotes Backend — Pydantic Response Schemas
=================================================

What:  Pydantic models defining the API contract returned to clients.
How:   FastAPI serializes route results through these models and documents
       them in the generated OpenAPI schema. Note records themselves are
       returned as NoteRecord (camelCase keys).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from campusnotes.models.note import NoteRecord


class UploadResponse(BaseModel):
    """
    What:  Response after a successful upload (HTTP 201).

    `note` and `file` carry the same record; `file` is the key existing
    frontends of this API read.
    """
    message: str = Field(
        default="File uploaded successfully!",
        description="Human-readable success message",
    )
    note: NoteRecord = Field(description="The stored note record")
    file: NoteRecord = Field(description="Same record as `note`")


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""
    message: str = Field(description="Human-readable result message")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "File and title are required",
            "details": {"field": "title"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Static liveness report; no store or media-host interaction."""
    status: str = Field(default="OK", description="Always OK while the process serves requests")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str = Field(description="Application version")
    uptime_seconds: float = Field(description="Seconds since service started")
