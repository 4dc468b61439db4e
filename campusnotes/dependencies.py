"""
CampusNotes Backend — Request Dependencies
============================================

What:  FastAPI dependencies that hand route handlers the service built at startup.
How:   create_app() stores the NoteService (and the stores inside it) on
       `app.state`; get_note_service reads it back for each request.
Who:   Injected into route handlers via Depends().

Example usage in a route:
    @router.get("/notes")
    async def list_notes(service: NoteService = Depends(get_note_service)):
        return await service.list_notes()
"""

from fastapi import Request

from campusnotes.services.note_service import NoteService


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service
