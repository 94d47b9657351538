from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from standards_api.db.base import Base
from standards_api.models import Standard

logger = logging.getLogger(__name__)

DEFAULT_STANDARDS: tuple[dict[str, str], ...] = (
    {
        "code": "ACI",
        "name": "American Concrete Institute",
        "type": "ACI",
        "icon": "🏗️",
        "description": "American standards for concrete design and testing",
    },
    {
        "code": "ASTM",
        "name": "American Society for Testing and Materials",
        "type": "ASTM",
        "icon": "🔬",
        "description": "American standards for materials and testing",
    },
    {
        "code": "BS",
        "name": "British Standards",
        "type": "BS",
        "icon": "🇬🇧",
        "description": "British standards for engineering and construction",
    },
)


def seed_standards(db: Session) -> int:
    """Insert the default standards whose code is not present yet. Returns the number inserted."""
    existing = set(db.scalars(select(Standard.code)).all())
    added = 0
    for row in DEFAULT_STANDARDS:
        if row["code"] in existing:
            continue
        db.add(Standard(**row))
        added += 1
    if added:
        db.commit()
        logger.info("Seeded %d default standards", added)
    return added


def init_db(engine: Engine) -> None:
    import standards_api.models  # noqa: F401  register tables on the metadata

    Base.metadata.create_all(engine)
    with Session(engine) as db:
        seed_standards(db)
