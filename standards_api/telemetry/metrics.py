from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from prometheus_client import (  # type: ignore[reportMissingImports]
    CONTENT_TYPE_LATEST,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from sqlalchemy import text
from sqlalchemy.orm import Session

from standards_api.db.session import get_db

logger = logging.getLogger(__name__)

# In-process API metrics
api_requests_total = Counter(
    "api_requests_total", "Total API requests", ["method", "endpoint", "status"]
)
api_request_duration_seconds = Histogram(
    "api_request_duration_seconds", "API request duration seconds", ["endpoint"]
)

file_uploads_total = Counter("file_uploads_total", "Files stored through the upload endpoint")
file_downloads_total = Counter("file_downloads_total", "Successful file downloads")
admin_logins_total = Counter("admin_logins_total", "Admin login attempts by result", ["result"])

# Set on scrape from the DB
standards_total = Gauge("standards_total", "Standards in the catalog")
files_total = Gauge("files_total", "Files in the catalog")

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
def metrics(db: Annotated[Session, Depends(get_db)]) -> PlainTextResponse:
    """Prometheus metrics endpoint.

    Catalog gauges are refreshed from the DB before rendering.
    """
    try:
        standards_total.set(int(db.execute(text("select count(1) from standards")).scalar() or 0))
        files_total.set(int(db.execute(text("select count(1) from files")).scalar() or 0))
    except Exception as e:
        logger.warning("metrics: failed to refresh catalog gauges: %s", e, exc_info=True)

    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)
