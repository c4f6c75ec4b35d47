"""Upload endpoints for the character image and the motion reference video.

  POST /upload/image  — multipart field `image`
  POST /upload/video  — multipart field `video`

Both store the file and return a URL the inference provider can fetch.
"""

import logging
from typing import Optional, Union

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from pydantic import BaseModel
from starlette.datastructures import UploadFile as StarletteUploadFile

from motion_control.api.deps import get_settings, get_upload_store
from motion_control.config import Settings
from motion_control.storage.uploads import UploadStore

logger = logging.getLogger("motion_control.upload")

router = APIRouter()

# A part sent as a plain form value instead of a file counts as no file
FilePart = Optional[Union[UploadFile, str]]


class UploadResponse(BaseModel):
    success: bool
    filename: str
    path: str
    url: str


def _public_url(request: Request, settings: Settings, path: str) -> str:
    base = settings.public_base_url or str(request.base_url)
    return f"{base.rstrip('/')}{path}"


async def _store(
    kind: str,
    upload: FilePart,
    request: Request,
    store: UploadStore,
    settings: Settings,
) -> UploadResponse:
    if not isinstance(upload, StarletteUploadFile):
        raise HTTPException(status_code=400, detail=f"No {kind} file uploaded")

    # UploadTooLargeError is mapped to 413 by the app's error handlers
    stored = await store.save(upload)

    path = f"{settings.uploads_mount_path.rstrip('/')}/{stored.filename}"
    logger.info("stored %s upload original=%r as %s", kind, upload.filename, stored.filename)
    return UploadResponse(
        success=True,
        filename=stored.filename,
        path=path,
        url=_public_url(request, settings, path),
    )


@router.post("/upload/image", response_model=UploadResponse)
async def upload_image(
    request: Request,
    image: FilePart = File(None),
    store: UploadStore = Depends(get_upload_store),
    settings: Settings = Depends(get_settings),
):
    """Store the character image."""
    return await _store("image", image, request, store, settings)


@router.post("/upload/video", response_model=UploadResponse)
async def upload_video(
    request: Request,
    video: FilePart = File(None),
    store: UploadStore = Depends(get_upload_store),
    settings: Settings = Depends(get_settings),
):
    """Store the motion reference video."""
    return await _store("video", video, request, store, settings)
