from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from standards_api.deps import get_db
from standards_api.schemas.catalog import FileDetailOut, StatisticsItem
from standards_api.services import catalog

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/search", response_model=list[FileDetailOut])
def search_files(
    db: Annotated[Session, Depends(get_db)],
    query: Annotated[str | None, Query()] = None,
) -> list[FileDetailOut]:
    return catalog.search(db, query)


@router.get("/statistics", response_model=list[StatisticsItem])
def statistics(db: Annotated[Session, Depends(get_db)]) -> list[StatisticsItem]:
    return catalog.statistics(db)
