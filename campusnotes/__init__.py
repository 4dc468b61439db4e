"""
CampusNotes Backend — Application Package Initializer
=======================================================

What: Backend for sharing study notes and files between students.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         NoteService (Orchestration) │  ← Validation, upload/delete flow
    ├─────────────────────────────────────┤
    │  NoteStore          │  BlobStore    │  ← Interfaces
    │  (JSON file)        │  (Cloudinary) │  ← Implementations
    └─────────────────────────────────────┘

    Routes never touch the backing file or the media host directly; both
    are reached through NoteService, which is built once by create_app().
"""

__version__ = "1.0.0"
