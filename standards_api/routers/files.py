from __future__ import annotations

import mimetypes
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from standards_api.deps import get_db
from standards_api.schemas.catalog import FileDetailOut, OkOut, UploadOut
from standards_api.security import require_admin
from standards_api.services import assets, catalog

router = APIRouter(prefix="/api/files", tags=["files"])


@router.post("/upload", response_model=UploadOut)
def upload_file(
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[str, Depends(require_admin)],
    standardId: Annotated[str | None, Form()] = None,
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    file: Annotated[UploadFile | None, File()] = None,
) -> UploadOut:
    row = assets.upload(
        db,
        standard_id=standardId,
        title=title,
        description=description,
        stream=file.file if file is not None else None,
        original_name=file.filename if file is not None else None,
        reported_size=file.size if file is not None else None,
    )
    return UploadOut(fileId=row.id)


@router.get("/{file_id}", response_model=FileDetailOut)
def get_file(file_id: int, db: Annotated[Session, Depends(get_db)]) -> FileDetailOut:
    return catalog.get_file(db, file_id)


@router.get("/{file_id}/download", response_class=FileResponse)
def download_file(file_id: int, db: Annotated[Session, Depends(get_db)]) -> FileResponse:
    f, path = assets.download(db, file_id)
    media_type = mimetypes.guess_type(f.filename)[0] or "application/octet-stream"
    return FileResponse(path, media_type=media_type, filename=f.filename)


@router.delete("/{file_id}", response_model=OkOut)
def delete_file(
    file_id: int,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[str, Depends(require_admin)],
) -> OkOut:
    assets.delete(db, file_id)
    return OkOut(message="File deleted successfully")
