import re

from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from standards_api.deps import SessionLocal
from standards_api.errors import StorageError
from standards_api.models import File
from tests.conftest import stored_blobs


def _rows() -> list[File]:
    with SessionLocal() as db:
        return list(db.scalars(select(File)).all())


def test_upload_then_list_and_get(client, standards, upload):
    content = b"%PDF-1.4 hello"
    r = upload(content=content)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "File uploaded successfully"
    file_id = body["fileId"]

    listed = client.get(f"/api/standards/{standards['ACI']['id']}/files").json()
    assert [f["id"] for f in listed] == [file_id]
    assert listed[0]["downloads"] == 0
    assert "filepath" not in listed[0]

    detail = client.get(f"/api/files/{file_id}").json()
    assert detail["title"] == "Spec 1"
    assert detail["description"] == "A test document"
    assert detail["filename"] == "spec.pdf"
    assert detail["filesize"] == len(content)
    assert detail["standard_id"] == standards["ACI"]["id"]
    assert detail["standard_code"] == "ACI"
    assert detail["standard_name"] == "American Concrete Institute"
    assert detail["uploaded_at"]


def test_blob_is_stored_under_timestamped_name(upload):
    assert upload(name="spec.pdf").status_code == 200

    blobs = stored_blobs()
    assert len(blobs) == 1
    assert re.fullmatch(r"\d{13}-spec\.pdf", blobs[0])
    assert _rows()[0].filepath == blobs[0]


def test_same_name_twice_gets_two_blobs(upload):
    assert upload(name="same.txt").status_code == 200
    assert upload(name="same.txt").status_code == 200
    assert len(stored_blobs()) == 2
    assert len({row.filepath for row in _rows()}) == 2


def test_same_name_in_same_millisecond_gets_next_stamp(upload, monkeypatch):
    from standards_api.services import blob_store

    monkeypatch.setattr(blob_store, "now_ms", lambda: 1700000000000)
    assert upload(content=b"first").status_code == 200
    r = upload(content=b"second")
    assert r.status_code == 200, r.text
    assert stored_blobs() == ["1700000000000-spec.pdf", "1700000000001-spec.pdf"]
    assert sorted(row.filepath for row in _rows()) == stored_blobs()


def test_path_components_are_stripped_from_storage_name(upload):
    r = upload(name="../../etc/notes.txt")
    assert r.status_code == 200, r.text
    assert re.fullmatch(r"\d{13}-notes\.txt", stored_blobs()[0])


def test_inner_double_dot_keeps_extension_on_disk(upload):
    r = upload(name="report..pdf")
    assert r.status_code == 200, r.text
    assert re.fullmatch(r"\d{13}-report\.\.pdf", stored_blobs()[0])


def test_extension_is_case_insensitive(upload):
    assert upload(name="REPORT.DOCX").status_code == 200


def test_disallowed_extension_rejected(upload):
    r = upload(name="malware.exe")
    assert r.status_code == 400
    assert "Unsupported file type .exe" in r.json()["error"]
    assert _rows() == []
    assert stored_blobs() == []


def test_missing_extension_rejected(upload):
    r = upload(name="README")
    assert r.status_code == 400
    assert "Unsupported file type" in r.json()["error"]
    assert _rows() == []


def test_missing_file_rejected(client, admin_headers, standards):
    r = client.post(
        "/api/files/upload",
        headers=admin_headers,
        data={"standardId": str(standards["ACI"]["id"]), "title": "No file"},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "No files were uploaded."}
    assert _rows() == []


def test_missing_title_rejected(upload):
    r = upload(title=None)
    assert r.status_code == 400
    assert r.json() == {"error": "title is required"}
    assert stored_blobs() == []


def test_blank_title_rejected(upload):
    r = upload(title="   ")
    assert r.status_code == 400
    assert _rows() == []


def test_missing_standard_rejected(client, admin_headers):
    r = client.post(
        "/api/files/upload",
        headers=admin_headers,
        data={"title": "Orphan"},
        files={"file": ("a.pdf", b"x", "application/pdf")},
    )
    assert r.status_code == 400
    assert r.json() == {"error": "standardId is required"}


def test_non_numeric_standard_rejected(client, admin_headers):
    r = client.post(
        "/api/files/upload",
        headers=admin_headers,
        data={"standardId": "ACI", "title": "Orphan"},
        files={"file": ("a.pdf", b"x", "application/pdf")},
    )
    assert r.status_code == 400
    assert _rows() == []


def test_unknown_standard_rejected(client, admin_headers):
    r = client.post(
        "/api/files/upload",
        headers=admin_headers,
        data={"standardId": "9999", "title": "Orphan"},
        files={"file": ("a.pdf", b"x", "application/pdf")},
    )
    assert r.status_code == 404
    assert r.json() == {"error": "Standard not found"}
    assert stored_blobs() == []


def test_upload_requires_admin(upload):
    r = upload(headers={})
    assert r.status_code == 401
    assert r.json() == {"error": "Admin authentication required"}
    assert _rows() == []
    assert stored_blobs() == []


def test_upload_rejects_fabricated_token(upload):
    r = upload(headers={"x-admin-token": "not-a-real-token"})
    assert r.status_code == 401
    assert _rows() == []


def test_write_failure_creates_no_row(upload, monkeypatch):
    from standards_api.services import blob_store

    def _fail(*args, **kwargs):
        raise StorageError("Failed to store file: No space left on device")

    monkeypatch.setattr(blob_store, "write_blob", _fail)
    r = upload()
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to store file: No space left on device"}
    assert _rows() == []


def test_db_failure_removes_blob(upload, monkeypatch):
    from standards_api.repos import file_repo

    def _fail(*args, **kwargs):
        raise OperationalError("INSERT INTO files", {}, Exception("database is locked"))

    monkeypatch.setattr(file_repo, "create", _fail)
    r = upload()
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to record uploaded file"}
    assert stored_blobs() == []


def test_oversized_upload_rejected(upload, monkeypatch):
    from standards_api.config import settings

    monkeypatch.setattr(settings, "max_upload_bytes", 10)
    r = upload(content=b"x" * 64)
    assert r.status_code == 400
    assert "maximum size" in r.json()["error"]
    assert _rows() == []
    assert stored_blobs() == []
