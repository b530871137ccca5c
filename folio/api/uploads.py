import uuid
from pathlib import PurePosixPath
from typing import Any

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from starlette.concurrency import run_in_threadpool

from folio.api import deps
from folio.core.errors import capture_exception
from folio.schemas import UploadOut
from folio.services.storage import ObjectStorage, StorageError, get_storage

logger = structlog.get_logger(__name__)

router = APIRouter()

COVERS_FOLDER = "covers"
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

NOT_AN_IMAGE = "Please upload an image file"
TOO_LARGE = "File size must be less than 5MB"
UPLOAD_FAILED = "Failed to upload image"


def _cover_key(filename: str) -> str:
    # Client file names are never used as keys, only their extension
    suffix = PurePosixPath(filename or "").suffix.lower()[:10]
    return f"{COVERS_FOLDER}/{uuid.uuid4()}{suffix}"


@router.post("", response_model=UploadOut, status_code=status.HTTP_201_CREATED)
async def upload_cover_image(
    file: UploadFile = File(...),
    identity: str = Depends(deps.get_current_identity),
    storage: ObjectStorage = Depends(get_storage),
) -> Any:
    """
    Store a cover image and return its public URL, to be sent as
    ``cover_image`` when composing a post.

    Only ``image/*`` uploads up to 5MB are accepted.
    """
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=NOT_AN_IMAGE)

    data = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=TOO_LARGE)

    key = _cover_key(file.filename)
    try:
        await run_in_threadpool(storage.upload, key, data, content_type)
    except StorageError as e:
        capture_exception(e, "upload_cover_image", key=key)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=UPLOAD_FAILED) from e

    logger.info("Cover image uploaded", key=key, size=len(data), identity=identity)
    return UploadOut(url=storage.public_url(key))
