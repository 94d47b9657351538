from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from standards_api.config import settings
from standards_api.errors import CatalogError, NotFound, StorageError, ValidationError
from standards_api.models import File
from standards_api.repos import file_repo, standard_repo
from standards_api.services import blob_store
from standards_api.telemetry.logging import get_logger
from standards_api.telemetry.metrics import file_downloads_total, file_uploads_total
from standards_api.validators import file_extension, is_allowed_extension, parse_positive_int

log = get_logger()


def upload(
    db: Session,
    *,
    standard_id: str | int | None,
    title: str | None,
    description: str | None,
    stream: BinaryIO | None,
    original_name: str | None,
    reported_size: int | None = None,
) -> File:
    """Store an uploaded document and record it.

    All validation happens before anything touches disk or the DB. Bytes are
    written first; the row is inserted only once the blob is complete, and the
    blob is removed again if the insert fails.
    """
    if stream is None or not original_name:
        raise ValidationError("No files were uploaded.")
    if standard_id is None or str(standard_id).strip() == "":
        raise ValidationError("standardId is required")
    if not title or not title.strip():
        raise ValidationError("title is required")

    sid = parse_positive_int(standard_id)
    if sid is None:
        raise ValidationError("standardId must be a positive integer")

    allowed = settings.allowed_extensions
    if not is_allowed_extension(original_name, allowed):
        ext = file_extension(original_name)
        shown = f".{ext}" if ext else "(none)"
        raise ValidationError(
            f"Unsupported file type {shown}. Allowed: {', '.join('.' + e for e in sorted(allowed))}"
        )
    if reported_size is not None and reported_size > settings.max_upload_bytes:
        raise ValidationError(f"File exceeds the maximum size of {settings.max_upload_bytes} bytes")

    if standard_repo.get(db, sid) is None:
        raise NotFound("Standard not found")

    name, written = blob_store.store_new_blob(stream, original_name, max_bytes=settings.max_upload_bytes)

    try:
        row = file_repo.create(
            db,
            standard_id=sid,
            title=title.strip(),
            description=(description or "").strip() or None,
            filename=original_name,
            filepath=name,
            filesize=reported_size if reported_size is not None else written,
        )
    except SQLAlchemyError as e:
        db.rollback()
        blob_store.discard_blob(name)
        log.error("file_upload_failed", standard_id=sid, filepath=name, error=str(e))
        raise StorageError("Failed to record uploaded file") from e

    file_uploads_total.inc()
    log.info("file_uploaded", file_id=row.id, standard_id=sid, filesize=row.filesize)
    return row


def download(db: Session, file_id: int) -> tuple[File, Path]:
    """Resolve a stored file for streaming and count the download.

    The counter is bumped only when both the row and its blob exist.
    """
    f = file_repo.get_with_standard(db, file_id)
    if f is None:
        raise NotFound("File not found")
    if not blob_store.blob_exists(f.filepath):
        log.warning("file_blob_missing", file_id=file_id, filepath=f.filepath)
        raise NotFound("File content not found")

    if not file_repo.increment_downloads(db, file_id):
        # deleted between lookup and update
        raise NotFound("File not found")

    file_downloads_total.inc()
    log.info("file_downloaded", file_id=file_id)
    return f, blob_store.blob_path(f.filepath)


def delete(db: Session, file_id: int) -> None:
    """Remove blob and row. A blob that cannot be removed never blocks removal of the row."""
    f = file_repo.get_with_standard(db, file_id)
    if f is None:
        raise NotFound("File not found")

    try:
        removed = blob_store.remove_blob(f.filepath)
        if not removed:
            log.info("file_blob_already_absent", file_id=file_id, filepath=f.filepath)
    except (OSError, CatalogError) as e:
        log.warning("file_blob_remove_failed", file_id=file_id, filepath=f.filepath, error=str(e))

    file_repo.delete_by_id(db, file_id)
    log.info("file_deleted", file_id=file_id)
