from __future__ import annotations

from functools import lru_cache

import redis

from standards_api.config import settings
from standards_api.db.session import SessionLocal, engine, get_db
from standards_api.services.sessions import (
    AdminGate,
    InMemorySessionStore,
    RedisSessionStore,
    SessionStore,
)
from standards_api.telemetry.logging import get_logger

log = get_logger()

__all__ = ["SessionLocal", "engine", "get_admin_gate", "get_db", "get_session_store"]


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    if settings.session_backend == "redis":
        log.info("session_store", backend="redis")
        return RedisSessionStore(redis.Redis.from_url(settings.redis_url, decode_responses=True))
    return InMemorySessionStore()


@lru_cache(maxsize=1)
def get_admin_gate() -> AdminGate:
    return AdminGate(
        get_session_store(),
        password=settings.admin_password,
        ttl_seconds=settings.admin_session_ttl_seconds,
    )
