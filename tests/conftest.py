# tests/conftest.py
import os
import shutil
import tempfile
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

# Settings() is built when standards_api is first imported, so the env goes first
TMP_ROOT = Path(tempfile.mkdtemp(prefix="standards-tests-"))
UPLOAD_DIR = TMP_ROOT / "uploads"
ADMIN_PASSWORD = "test-password"

os.environ["DATABASE_URL"] = f"sqlite:///{TMP_ROOT / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(UPLOAD_DIR)
os.environ["ADMIN_PASSWORD"] = ADMIN_PASSWORD
os.environ["SESSION_BACKEND"] = "memory"
for _name in ("ADMIN_SESSION_TTL_SECONDS", "ALLOWED_EXTENSIONS", "MAX_UPLOAD_BYTES", "CORS_ORIGINS"):
    os.environ.pop(_name, None)


@pytest.fixture(scope="session")
def client():
    from standards_api.main import app

    # context manager runs the lifespan: tables + seed
    with TestClient(app) as c:
        yield c
    shutil.rmtree(TMP_ROOT, ignore_errors=True)


@pytest.fixture(autouse=True)
def clean_state(client: TestClient):
    """Every test starts with no files, no blobs and no admin sessions."""
    from standards_api.deps import SessionLocal, get_session_store
    from standards_api.models import File

    with SessionLocal() as db:
        db.execute(delete(File))
        db.commit()
    shutil.rmtree(UPLOAD_DIR, ignore_errors=True)
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    get_session_store().clear()
    yield


@pytest.fixture
def standards(client: TestClient) -> dict[str, dict]:
    r = client.get("/api/standards")
    assert r.status_code == 200, r.text
    return {s["code"]: s for s in r.json()}


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    r = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return {"x-admin-token": r.json()["token"]}


@pytest.fixture
def upload(client: TestClient, admin_headers: dict, standards: dict) -> Callable[..., httpx.Response]:
    """Factory posting a multipart upload as admin. Returns the raw response."""

    def _upload(
        code: str = "ACI",
        name: str = "spec.pdf",
        content: bytes = b"%PDF-1.4 test document",
        title: str | None = "Spec 1",
        description: str | None = "A test document",
        headers: dict | None = None,
    ) -> httpx.Response:
        data = {"standardId": str(standards[code]["id"])}
        if title is not None:
            data["title"] = title
        if description is not None:
            data["description"] = description
        return client.post(
            "/api/files/upload",
            headers=admin_headers if headers is None else headers,
            data=data,
            files={"file": (name, content, "application/octet-stream")},
        )

    return _upload


def stored_blobs() -> list[str]:
    return sorted(p.name for p in UPLOAD_DIR.iterdir() if p.is_file())
