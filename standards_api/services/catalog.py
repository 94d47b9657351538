from __future__ import annotations

from sqlalchemy.orm import Session

from standards_api.errors import NotFound
from standards_api.models import File, Standard
from standards_api.repos import file_repo, standard_repo
from standards_api.schemas.catalog import FileDetailOut, StatisticsItem


def file_detail(f: File) -> FileDetailOut:
    return FileDetailOut(
        id=f.id,
        standard_id=f.standard_id,
        title=f.title,
        description=f.description,
        filename=f.filename,
        filesize=f.filesize,
        downloads=f.downloads,
        uploaded_at=f.uploaded_at,
        standard_name=f.standard.name,
        standard_code=f.standard.code,
    )


def list_standards(db: Session) -> list[Standard]:
    return standard_repo.list_all(db)


def list_files(db: Session, standard_id: int) -> list[File]:
    if standard_repo.get(db, standard_id) is None:
        raise NotFound("Standard not found")
    return file_repo.list_by_standard(db, standard_id)


def get_file(db: Session, file_id: int) -> FileDetailOut:
    f = file_repo.get_with_standard(db, file_id)
    if f is None:
        raise NotFound("File not found")
    return file_detail(f)


def search(db: Session, query: str | None) -> list[FileDetailOut]:
    """An empty query matches nothing rather than everything."""
    if not query or not query.strip():
        return []
    return [file_detail(f) for f in file_repo.search(db, query)]


def statistics(db: Session) -> list[StatisticsItem]:
    return [
        StatisticsItem(
            id=s.id,
            code=s.code,
            name=s.name,
            file_count=file_count,
            total_downloads=total_downloads,
        )
        for s, file_count, total_downloads in standard_repo.statistics(db)
    ]
