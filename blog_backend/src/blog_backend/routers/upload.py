from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..auth import require_admin
from ..errors import BadRequest
from ..schemas import ErrorOut, UploadOut
from ..uploads import UploadStore, get_upload_store

router = APIRouter(
    prefix="/api",
    tags=["uploads"],
)


# PUBLIC_INTERFACE
@router.post(
    "/upload",
    response_model=UploadOut,
    summary="Upload File",
    description=(
        "Store one file sent as multipart field 'file' and return its public URL. "
        "Any content type is accepted up to the configured size ceiling."
    ),
    dependencies=[Depends(require_admin)],
    responses={
        400: {"model": ErrorOut, "description": "No file attached"},
        401: {"model": ErrorOut, "description": "Not logged in or session expired"},
        413: {"model": ErrorOut, "description": "File exceeds the size ceiling"},
    },
)
def upload_file(
    file: Optional[UploadFile] = File(None),
    store: UploadStore = Depends(get_upload_store),
) -> UploadOut:
    if file is None:
        raise BadRequest("No file uploaded")

    original = file.filename or ""
    try:
        stored = store.save(file.file, original)
    finally:
        file.file.close()
    return UploadOut(url=stored.url, filename=original, originalFilename=original)
