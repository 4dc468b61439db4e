"""
CampusNotes Backend — Upload Route Handler
============================================

What:  Handles POST /api/upload, a multipart form with one file plus metadata.
How:   Checks the spooled part size against the limit, reads at most
       max_upload_size + 1 bytes into memory, delegates to NoteService,
       returns 201.

Request Flow:
    1. Client sends multipart/form-data: file, title, subject, desc, type
    2. FastAPI extracts the UploadFile and form fields (all optional at this
       layer so that a missing file/title becomes our 400, not FastAPI's 422)
    3. Early check on file.size (oversized parts are never read into memory)
    4. NoteService: validate → upload to media host → store record
    5. Return 201 Created with the stored record
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from campusnotes.dependencies import get_note_service
from campusnotes.schemas.note import ErrorResponse, UploadResponse
from campusnotes.services.note_service import NoteService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Upload"])


@router.post(
    "/upload",
    status_code=201,
    response_model=UploadResponse,
    responses={
        201: {"description": "File uploaded and note stored", "model": UploadResponse},
        400: {"description": "Missing file/title or file too large", "model": ErrorResponse},
        500: {"description": "Media host or note store failure", "model": ErrorResponse},
    },
    summary="Upload a file with note metadata",
    description=(
        "Upload one file (max 50MB) together with a title and optional subject, "
        "description and type. The file is stored on the media host; the returned "
        "note record carries its URL and public id."
    ),
)
async def upload_note(
    file: Optional[UploadFile] = File(default=None, description="The file to share"),
    title: Optional[str] = Form(default=None, description="Required, non-blank"),
    subject: Optional[str] = Form(default=None),
    desc: Optional[str] = Form(default=None),
    type: Optional[str] = Form(default=None, description="Category, e.g. note, image, pyq"),
    service: NoteService = Depends(get_note_service),
) -> UploadResponse:
    content: Optional[bytes] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None

    try:
        if file is not None:
            # file.size is what the multipart parser spooled; reject before buffering it
            service.check_upload(file.filename, file.size, title)
            content = await file.read(service.max_upload_size + 1)
            filename = file.filename
            content_type = file.content_type
            logger.info(
                "Received upload: filename=%s, size=%d bytes",
                filename or "unknown",
                len(content),
            )

        note = await service.upload_note(
            filename=filename,
            content=content,
            content_type=content_type,
            title=title,
            subject=subject,
            desc=desc,
            note_type=type,
        )
        return UploadResponse(message="File uploaded successfully!", note=note, file=note)

    finally:
        if file is not None:
            await file.close()
