from __future__ import annotations

import hmac
import json
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Protocol

from standards_api.errors import Unauthorized
from standards_api.telemetry.logging import get_logger
from standards_api.telemetry.metrics import admin_logins_total

if TYPE_CHECKING:
    import redis

log = get_logger()

TOKEN_BYTES = 32
REDIS_KEY_PREFIX = "admin:session:"


@dataclass(frozen=True)
class AdminSession:
    token: str
    created_at: float


class SessionStore(Protocol):
    def put(self, token: str, session: AdminSession, ttl: int | None = None) -> None: ...

    def get(self, token: str) -> AdminSession | None: ...

    def delete(self, token: str) -> None: ...


class InMemorySessionStore:
    """Process-local store. Sessions vanish on restart and are not shared across workers."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._items: dict[str, tuple[AdminSession, float | None]] = {}

    def put(self, token: str, session: AdminSession, ttl: int | None = None) -> None:
        expires_at = self._clock() + ttl if ttl else None
        with self._lock:
            self._items[token] = (session, expires_at)

    def get(self, token: str) -> AdminSession | None:
        with self._lock:
            item = self._items.get(token)
            if item is None:
                return None
            session, expires_at = item
            if expires_at is not None and self._clock() >= expires_at:
                del self._items[token]
                return None
            return session

    def delete(self, token: str) -> None:
        with self._lock:
            self._items.pop(token, None)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class RedisSessionStore:
    """Shared store for multi-instance deployments; expiry is delegated to Redis."""

    def __init__(self, client: redis.Redis, prefix: str = REDIS_KEY_PREFIX) -> None:
        self._rds = client
        self._prefix = prefix

    def _key(self, token: str) -> str:
        return f"{self._prefix}{token}"

    def put(self, token: str, session: AdminSession, ttl: int | None = None) -> None:
        payload = json.dumps(asdict(session), separators=(",", ":"))
        if ttl:
            self._rds.set(self._key(token), payload, ex=int(ttl))
        else:
            self._rds.set(self._key(token), payload)

    def get(self, token: str) -> AdminSession | None:
        raw = self._rds.get(self._key(token))
        if raw is None:
            return None
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8", errors="ignore")
        try:
            data = json.loads(raw)
            return AdminSession(token=str(data["token"]), created_at=float(data["created_at"]))
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            log.warning("admin_session_malformed", error=str(e))
            self._rds.delete(self._key(token))
            return None

    def delete(self, token: str) -> None:
        self._rds.delete(self._key(token))


def new_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


class AdminGate:
    """Shared-password admin login backed by a ``SessionStore``.

    A token grants admin capability for as long as it is present in the store:
    until logout, restart (memory backend) or the optional TTL.
    """

    def __init__(
        self,
        store: SessionStore,
        password: str,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.store = store
        self._password = password
        self._ttl = ttl_seconds
        self._clock = clock

    def login(self, password: str | None) -> str:
        if not password or not hmac.compare_digest(
            password.encode("utf-8"), self._password.encode("utf-8")
        ):
            admin_logins_total.labels(result="denied").inc()
            log.info("admin_login_failed")
            raise Unauthorized("Invalid password")

        token = new_token()
        self.store.put(token, AdminSession(token=token, created_at=self._clock()), ttl=self._ttl)
        admin_logins_total.labels(result="ok").inc()
        log.info("admin_login", ttl=self._ttl)
        return token

    def logout(self, token: str | None) -> None:
        if not token:
            return
        self.store.delete(token)
        log.info("admin_logout")

    def is_admin(self, token: str | None) -> bool:
        if not token:
            return False
        return self.store.get(token) is not None

    def require_admin(self, token: str | None) -> None:
        if not self.is_admin(token):
            raise Unauthorized("Admin authentication required")
