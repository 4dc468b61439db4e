# Services package init
"""
CampusNotes Backend — Services Layer
======================================

What:  Business logic and storage adapters between routes (HTTP) and the outside world.

Service Inventory:
    - NoteStore (abstract): Note record persistence contract
    - JsonNoteStore: Whole-file JSON array implementation with a single-writer lock
    - BlobStore (abstract): Remote file storage contract (upload / destroy)
    - CloudinaryBlobStore: Cloudinary SDK implementation
    - NoteService: Orchestrates validate → upload → persist and delete flows
"""
