"""
CampusNotes Backend — Notes Route Handlers
============================================

What:  Listing, lookup and deletion of note records.
How:   Extracts path parameters, delegates to NoteService, returns JSON.

Routes:
    GET    /api/notes          (alias GET /api/data)       every record, newest first
    GET    /api/notes/{id}     (alias GET /api/data/{id})  one record
    DELETE /api/data/{id}      (alias DELETE /api/notes/{id})

Errors (NotFoundError → 404, StoreUnavailableError → 500, ...) are turned
into responses by the global exception handlers in main.py.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from campusnotes.dependencies import get_note_service
from campusnotes.models.note import NoteRecord
from campusnotes.schemas.note import ErrorResponse, MessageResponse
from campusnotes.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Notes"])


@router.get(
    "/notes",
    response_model=List[NoteRecord],
    responses={
        200: {"description": "Every note record, newest first"},
        500: {"description": "Note store unavailable", "model": ErrorResponse},
    },
    summary="List all notes",
)
@router.get("/data", response_model=List[NoteRecord], include_in_schema=False)
async def list_notes(
    response: Response,
    service: NoteService = Depends(get_note_service),
) -> List[NoteRecord]:
    """
    Return the full collection.

    There is no pagination; X-Total-Count mirrors the array length for
    clients that display a count.
    """
    notes = await service.list_notes()
    response.headers["X-Total-Count"] = str(len(notes))
    return notes


@router.get(
    "/notes/{note_id}",
    response_model=NoteRecord,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Note store unavailable", "model": ErrorResponse},
    },
    summary="Get a single note by ID",
)
@router.get("/data/{note_id}", response_model=NoteRecord, include_in_schema=False)
async def get_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> NoteRecord:
    return await service.get_note(note_id)


@router.delete(
    "/data/{note_id}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Note not found", "model": ErrorResponse},
        500: {"description": "Note store unavailable", "model": ErrorResponse},
    },
    summary="Delete a note and its uploaded file",
    description=(
        "Removes the note record. The uploaded file is destroyed on the media "
        "host on a best-effort basis: if that fails the record is still removed."
    ),
)
@router.delete("/notes/{note_id}", response_model=MessageResponse, include_in_schema=False)
async def delete_note(
    note_id: str,
    service: NoteService = Depends(get_note_service),
) -> MessageResponse:
    await service.delete_note(note_id)
    return MessageResponse(message="File deleted successfully!")
