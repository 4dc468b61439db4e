# Routes package init
"""
CampusNotes Backend — API Routes Package
==========================================

Route Inventory:
    - health.py:  GET    /api/health
    - notes.py:   GET    /api/notes, /api/data          (list)
                  GET    /api/notes/{id}, /api/data/{id} (single note)
                  DELETE /api/data/{id}, /api/notes/{id}
    - upload.py:  POST   /api/upload

Routes stay thin: pull data out of the request, call NoteService, shape
the response. Business rules live in the services package.
"""
