"""
CampusNotes Backend — Cloudinary Blob Store
=============================================

What:  BlobStore implementation backed by the Cloudinary media host.
How:   Uses the official `cloudinary` SDK. Credentials are passed with every
       call instead of through `cloudinary.config()`, so two stores with
       different accounts can coexist (tests build their own). The SDK is
       synchronous; calls run in a worker thread via asyncio.to_thread so
       the event loop keeps serving other requests during a large upload.
Who:   Constructed once by create_app(); called by NoteService.

Error handling:
    Any SDK or network failure becomes BlobStoreError. There is no retry and
    no circuit breaker: the caller sees the failure on the first attempt.
    A destroy answered with "not found" counts as success (the blob is gone
    either way).
"""

import asyncio
import io
import logging
import time
import uuid
from typing import Any, Dict, Optional

import cloudinary.uploader

from campusnotes.exceptions import BlobStoreError
from campusnotes.services.blob_base import BlobStore, BlobUploadResult

logger = logging.getLogger(__name__)

# Destroy results that leave no blob behind
_DESTROY_OK = {"ok", "not found"}


class CloudinaryBlobStore(BlobStore):
    """
    Uploads and destroys blobs in one Cloudinary account.

    Remote layout:
        <folder>/<public_id>
        e.g. campusnotes/notes/1700000000000_3f2a9c0e_syllabus (resource_type="raw")
             campusnotes/image/1700000000000_b71d04aa_diagram (resource_type="image")
    """

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        self._credentials: Dict[str, str] = {
            "cloud_name": cloud_name,
            "api_key": api_key,
            "api_secret": api_secret,
        }
        logger.info("CloudinaryBlobStore initialized for cloud=%s", cloud_name or "<unset>")

    async def upload(
        self,
        content: bytes,
        *,
        resource_type: str,
        folder: str,
        public_id: Optional[str] = None,
    ) -> BlobUploadResult:
        call_id = str(uuid.uuid4())[:8]
        options: Dict[str, Any] = {
            "resource_type": resource_type,
            "folder": folder,
            **self._credentials,
        }
        if public_id:
            options["public_id"] = public_id

        logger.info(
            "[%s] Uploading %d bytes to %s (resource_type=%s)",
            call_id,
            len(content),
            folder,
            resource_type,
        )
        start_time = time.time()

        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.upload, io.BytesIO(content), **options
            )
        except Exception as e:
            logger.error(
                "[%s] Cloudinary upload failed after %.0fms: %s",
                call_id,
                (time.time() - start_time) * 1000,
                str(e),
            )
            raise BlobStoreError(
                message=f"Upload failed: {e}",
                context={"call_id": call_id, "folder": folder, "error_type": type(e).__name__},
            )

        secure_url = result.get("secure_url")
        stored_id = result.get("public_id")
        if not secure_url or not stored_id:
            logger.error("[%s] Cloudinary upload returned no URL/public_id: %s", call_id, result)
            raise BlobStoreError(
                message="Upload failed: the media host returned an incomplete response",
                context={"call_id": call_id, "response_keys": sorted(result)},
            )

        logger.info(
            "[%s] Upload completed in %.0fms: %s",
            call_id,
            (time.time() - start_time) * 1000,
            stored_id,
        )
        return BlobUploadResult(secure_url=secure_url, public_id=stored_id)

    async def destroy(self, public_id: str, *, resource_type: str) -> None:
        try:
            result = await asyncio.to_thread(
                cloudinary.uploader.destroy,
                public_id,
                resource_type=resource_type,
                **self._credentials,
            )
        except Exception as e:
            logger.error("Cloudinary destroy of %s failed: %s", public_id, str(e))
            raise BlobStoreError(
                message=f"Delete failed: {e}",
                context={"public_id": public_id, "error_type": type(e).__name__},
            )

        outcome = result.get("result") if isinstance(result, dict) else None
        if outcome not in _DESTROY_OK:
            logger.error("Cloudinary destroy of %s returned %r", public_id, result)
            raise BlobStoreError(
                message=f"Delete failed: media host answered '{outcome}'",
                context={"public_id": public_id, "result": outcome},
            )

        logger.info("Destroyed blob %s (%s)", public_id, outcome)
