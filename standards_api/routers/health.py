from __future__ import annotations

import os
import time
import uuid
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from standards_api.deps import get_db
from standards_api.services.blob_store import upload_root

router = APIRouter(prefix="/api", tags=["health"])
START_TIME = time.time()


def _ok(v: object) -> bool:
    return v == "ok"


def get_health_checks(db: Session) -> dict[str, Any]:
    checks: dict[str, Any] = {}

    try:
        db.execute(text("SELECT 1"))
        checks["db"] = "ok"
    except Exception as e:
        checks["db"] = {"error": str(e)}

    # upload dir must be writable
    try:
        probe = upload_root() / f".probe-{uuid.uuid4().hex}"
        probe.write_bytes(b"")
        probe.unlink()
        checks["uploads"] = "ok"
    except OSError as e:
        checks["uploads"] = {"error": str(e)}

    return checks


@router.get("/health", status_code=status.HTTP_200_OK)
def health(db: Session = Depends(get_db)) -> dict[str, Any]:
    checks = get_health_checks(db)
    is_healthy = all(_ok(v) for v in checks.values())
    return {
        "status": "OK" if is_healthy else "degraded",
        "message": "Server is running",
        "version": os.getenv("GIT_SHA") or "dev",
        "uptime": time.time() - START_TIME,
        "checks": checks,
    }
