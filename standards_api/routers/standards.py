from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from standards_api.deps import get_db
from standards_api.schemas.catalog import FileOut, StandardOut
from standards_api.services import catalog

router = APIRouter(prefix="/api/standards", tags=["standards"])


@router.get("", response_model=list[StandardOut])
def list_standards(db: Annotated[Session, Depends(get_db)]) -> list[StandardOut]:
    return [StandardOut.model_validate(s) for s in catalog.list_standards(db)]


@router.get("/{standard_id}/files", response_model=list[FileOut])
def list_standard_files(standard_id: int, db: Annotated[Session, Depends(get_db)]) -> list[FileOut]:
    return [FileOut.model_validate(f) for f in catalog.list_files(db, standard_id)]
