from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from standards_api.models import File, Standard


def list_all(db: Session) -> list[Standard]:
    return list(db.scalars(select(Standard).order_by(Standard.id)).all())


def get(db: Session, standard_id: int) -> Standard | None:
    return db.get(Standard, standard_id)


def statistics(db: Session) -> list[tuple[Standard, int, int]]:
    """
    Per standard: (standard, file_count, total_downloads).
    LEFT JOIN so standards without files are included with zeros.
    """
    file_count = func.count(File.id)
    total_downloads = func.coalesce(func.sum(File.downloads), 0)
    stmt = (
        select(Standard, file_count, total_downloads)
        .outerjoin(File, File.standard_id == Standard.id)
        .group_by(Standard.id)
        .order_by(Standard.id)
    )
    return [(s, int(cnt or 0), int(dl or 0)) for s, cnt, dl in db.execute(stmt).all()]
