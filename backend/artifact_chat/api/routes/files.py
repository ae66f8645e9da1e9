"""Upload and download routes for chat attachments and generated documents."""

import logging
import mimetypes
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse

from artifact_chat.api.deps import get_generated_store, get_upload_store
from artifact_chat.core.exceptions import InvalidBlobKeyError
from artifact_chat.schemas.chat import UploadedFileMetadata, UploadResponse
from artifact_chat.services.blob_store import (
    BlobStore,
    make_key,
    sanitize_name,
    strip_key_prefix,
)
from artifact_chat.services.document_factory import mime_type_for
from artifact_chat.services.file_classification import build_text_preview, classify

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

UPLOADS_URL_PREFIX = "/uploads"


# ── Upload ────────────────────────────────────────────────────────────

@router.post(
    "/upload",
    status_code=201,
    response_model=UploadResponse,
    response_model_exclude_none=True,
)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    store: BlobStore = Depends(get_upload_store),
):
    """Store attachments and describe them for use in later chat messages."""
    if not files:
        raise HTTPException(
            status_code=400, detail="No files received under the `files` field."
        )

    uploads: List[UploadedFileMetadata] = []

    for file in files:
        original_name = Path(file.filename or "upload").name
        file_id, stored_filename = make_key(sanitize_name(original_name))

        content = await file.read()
        await store.write(stored_filename, content)

        category = classify(file.content_type, original_name)
        logger.info(
            "Upload received: filename=%s size=%d category=%s",
            original_name, len(content), category,
        )

        uploads.append(
            UploadedFileMetadata(
                id=file_id,
                originalName=original_name,
                storedFilename=stored_filename,
                mimeType=file.content_type or "application/octet-stream",
                size=len(content),
                publicUrl=f"{UPLOADS_URL_PREFIX}/{stored_filename}",
                category=category,
                textPreview=build_text_preview(content) if category == "text" else None,
            )
        )

    return UploadResponse(files=uploads)


@router.get(UPLOADS_URL_PREFIX + "/{stored_filename:path}")
async def serve_upload(
    stored_filename: str,
    store: BlobStore = Depends(get_upload_store),
):
    """Serve an uploaded attachment at its publicUrl."""
    try:
        filepath = store.resolve(stored_filename)
    except InvalidBlobKeyError:
        raise HTTPException(status_code=400, detail="Invalid file path")

    if not store.exists(stored_filename):
        raise HTTPException(status_code=404, detail="File not found")

    mime_type, _ = mimetypes.guess_type(filepath.name)
    return FileResponse(
        path=str(filepath),
        media_type=mime_type or "application/octet-stream",
    )


# ── Download ──────────────────────────────────────────────────────────

@router.get("/generated/{stored_filename:path}")
async def download_generated(
    stored_filename: str,
    store: BlobStore = Depends(get_generated_store),
):
    """Download a document written by the create_document tool."""
    try:
        filepath = store.resolve(stored_filename)
    except InvalidBlobKeyError:
        raise HTTPException(status_code=400, detail="Invalid file path")

    if not store.exists(stored_filename):
        raise HTTPException(status_code=404, detail="File not found")

    download_name = strip_key_prefix(stored_filename)

    return FileResponse(
        path=str(filepath),
        media_type=mime_type_for(stored_filename),
        headers={"Content-Disposition": f'attachment; filename="{download_name}"'},
    )
