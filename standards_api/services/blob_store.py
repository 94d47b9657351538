from __future__ import annotations

import time
from pathlib import Path
from typing import BinaryIO

from standards_api.config import settings
from standards_api.errors import StorageError, ValidationError
from standards_api.telemetry.logging import get_logger
from standards_api.validators import sanitize_filename

log = get_logger()

CHUNK_SIZE = 1024 * 1024
NAME_ATTEMPTS = 50


class BlobNameTaken(StorageError):
    """The storage name is already used by another blob."""


def upload_root() -> Path:
    base = Path(settings.upload_dir)
    base.mkdir(parents=True, exist_ok=True)
    return base


def now_ms() -> int:
    return int(time.time() * 1000)


def storage_name(original_name: str, at_ms: int | None = None) -> str:
    """``<epoch-ms>-<original name>``; the name part is reduced to a safe basename."""
    stamp = now_ms() if at_ms is None else at_ms
    return f"{stamp}-{sanitize_filename(original_name)}"


def blob_path(name: str) -> Path:
    root = upload_root().resolve()
    path = (root / name).resolve()
    if path.parent != root:
        raise StorageError("Invalid storage path")
    return path


def write_blob(src: BinaryIO, name: str, max_bytes: int | None = None) -> int:
    """Copy ``src`` into the upload directory under ``name``.

    Returns the number of bytes written. Nothing is left on disk when the copy fails.
    """
    dest = blob_path(name)
    written = 0
    try:
        with dest.open("xb") as out:
            while True:
                chunk = src.read(CHUNK_SIZE)
                if not chunk:
                    break
                written += len(chunk)
                if max_bytes is not None and written > max_bytes:
                    raise ValidationError(f"File exceeds the maximum size of {max_bytes} bytes")
                out.write(chunk)
    except ValidationError:
        discard_blob(name)
        raise
    except FileExistsError as e:
        raise BlobNameTaken(f"Storage path already in use: {name}") from e
    except OSError as e:
        discard_blob(name)
        log.error("blob_write_failed", filepath=name, error=str(e))
        raise StorageError(f"Failed to store file: {e.strerror or e}") from e
    except BaseException:
        # client went away mid-upload
        discard_blob(name)
        raise
    return written


def store_new_blob(src: BinaryIO, original_name: str, max_bytes: int | None = None) -> tuple[str, int]:
    """Write ``src`` under a fresh storage name and return ``(name, bytes_written)``.

    Same-name uploads within one millisecond move on to the next free stamp.
    The stream is untouched until a name has been claimed.
    """
    stamp = now_ms()
    for offset in range(NAME_ATTEMPTS):
        name = storage_name(original_name, at_ms=stamp + offset)
        try:
            return name, write_blob(src, name, max_bytes=max_bytes)
        except BlobNameTaken:
            log.info("blob_name_taken", filepath=name)
    raise StorageError("No free storage name for upload")


def blob_exists(name: str) -> bool:
    try:
        return blob_path(name).is_file()
    except StorageError:
        return False


def remove_blob(name: str) -> bool:
    """Delete a stored blob. Returns False when it was already gone."""
    try:
        blob_path(name).unlink()
        return True
    except FileNotFoundError:
        return False


def discard_blob(name: str) -> None:
    try:
        remove_blob(name)
    except OSError as e:
        log.warning("blob_discard_failed", filepath=name, error=str(e))
