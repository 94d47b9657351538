from __future__ import annotations

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session, joinedload

from standards_api.models import File


def list_by_standard(db: Session, standard_id: int) -> list[File]:
    """Files of one standard, newest first."""
    stmt = (
        select(File)
        .where(File.standard_id == standard_id)
        .order_by(File.uploaded_at.desc(), File.id.desc())
    )
    return list(db.scalars(stmt).all())


def get_with_standard(db: Session, file_id: int) -> File | None:
    stmt = select(File).options(joinedload(File.standard)).where(File.id == file_id)
    return db.scalars(stmt).first()


def search(db: Session, query: str) -> list[File]:
    """Case-insensitive substring match on title or description, newest first."""
    stmt = (
        select(File)
        .options(joinedload(File.standard))
        .where(
            or_(
                File.title.icontains(query, autoescape=True),
                File.description.icontains(query, autoescape=True),
            )
        )
        .order_by(File.uploaded_at.desc(), File.id.desc())
    )
    return list(db.scalars(stmt).all())


def create(
    db: Session,
    *,
    standard_id: int,
    title: str,
    description: str | None,
    filename: str,
    filepath: str,
    filesize: int | None,
) -> File:
    row = File(
        standard_id=standard_id,
        title=title,
        description=description,
        filename=filename,
        filepath=filepath,
        filesize=filesize,
        downloads=0,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def increment_downloads(db: Session, file_id: int) -> bool:
    """Atomic ``downloads = downloads + 1`` in the database. False if the row is gone."""
    res = db.execute(
        update(File)
        .where(File.id == file_id)
        .values(downloads=File.downloads + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return bool(res.rowcount)


def delete_by_id(db: Session, file_id: int) -> bool:
    res = db.execute(delete(File).where(File.id == file_id).execution_options(synchronize_session=False))
    db.commit()
    return bool(res.rowcount)
