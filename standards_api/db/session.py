from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from standards_api.config import settings


def _engine_kwargs() -> dict[str, Any]:
    if settings.is_sqlite:
        # requests are served from a thread pool
        return {"connect_args": {"check_same_thread": False, "timeout": 30}}
    return {
        "pool_size": int(settings.db_pool_size),
        "max_overflow": int(settings.db_max_overflow),
        "pool_pre_ping": True,
    }


engine = create_engine(settings.database_url, future=True, **_engine_kwargs())

if settings.is_sqlite:

    @event.listens_for(engine, "connect")
    def _sqlite_pragmas(dbapi_conn, _record) -> None:  # type: ignore[no-untyped-def]
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


SessionLocal = sessionmaker(engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
