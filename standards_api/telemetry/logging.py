from __future__ import annotations

import logging
from typing import Any, Mapping

import structlog

from standards_api import __version__
from standards_api.config import settings

SERVICE_NAME = "standards-api"

# Admin credentials must never reach a log line, whatever key they were bound under
SECRET_KEYS = frozenset({"token", "admin_token", "x-admin-token", "password", "headers", "client_ip"})


def init_logging() -> None:
    """One JSON object per line on stdout.

    Every line carries ``ts``, ``level``, ``event``, ``service`` and ``version``.
    Request lines add ``trace_id``, ``action`` (``"GET /api/files/{file_id}"``),
    ``status``, ``result`` and ``duration_ms``. Catalog events (``file_uploaded``,
    ``file_downloaded``, ``file_deleted``, ``admin_login`` ...) add ``file_id``,
    ``standard_id``, ``filepath`` or ``ttl`` as relevant.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(message)s")

    # Access lines would duplicate the request event with the client address in it
    logging.getLogger("uvicorn.access").disabled = True

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", key="ts"),
            add_service,
            drop_secrets,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )


def add_service(logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> dict[str, Any]:
    out = dict(event_dict)
    out["level"] = str(out.get("level") or method_name).lower()
    out.setdefault("service", SERVICE_NAME)
    out.setdefault("version", __version__)
    return out


def drop_secrets(logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in event_dict.items():
        if key.lower() in SECRET_KEYS:
            continue
        if isinstance(value, Mapping):
            value = {k: v for k, v in value.items() if str(k).lower() not in SECRET_KEYS}
        out[key] = value
    return out


def get_logger() -> structlog.stdlib.BoundLogger:  # type: ignore[name-defined]
    return structlog.get_logger()
