# campusconnect/utils/uploads.py
import logging
import mimetypes
import os
import random
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Optional

from campusconnect.core.config import Settings
from campusconnect.core.exceptions import NotFoundError, StorageError, ValidationError

logger = logging.getLogger(__name__)

UPLOAD_KINDS = ("materials", "resumes", "events")
CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredFile:
    file_name: str
    file_path: str  # "/uploads/<kind>/<stored name>"
    file_size: int
    mime_type: str


def stored_name(original_name: str) -> str:
    """``<epoch-ms>-<random-int>-<original-filename>``"""
    return f"{int(time.time() * 1000)}-{random.randint(0, 10 ** 9)}-{original_name}"


def _clean_filename(filename: str) -> str:
    # 경로 구분자 제거 (업로드 디렉터리 밖으로 나가지 않도록)
    return os.path.basename(filename.replace("\\", "/")).strip()


def resolve_path(relative_path: str, settings: Settings) -> str:
    """Map a record's ``/uploads/...`` reference to a file under UPLOAD_DIR."""
    parts = [part for part in relative_path.replace("\\", "/").split("/") if part and part != ".."]
    if parts and parts[0] == "uploads":
        parts = parts[1:]
    return os.path.join(settings.UPLOAD_DIR, *parts)


def save_upload(upload, kind: str, settings: Settings) -> StoredFile:
    """
    Stream an uploaded file into ``UPLOAD_DIR/<kind>``.

    ``upload`` is anything shaped like FastAPI's ``UploadFile``: ``filename``,
    ``content_type`` and a readable ``file``. Disallowed extensions and files
    over ``MAX_FILE_SIZE`` raise ValidationError; a partially written file is
    removed.
    """
    original_name = _clean_filename(upload.filename or "")
    if not original_name:
        raise ValidationError("File is required", errors=[{"field": "file", "message": "File is required"}])

    allowed = settings.ALLOWED_EXTENSIONS.get(kind, [])
    extension = os.path.splitext(original_name)[1].lower().lstrip(".")
    if extension not in allowed:
        message = f"Invalid file type. Allowed types: {', '.join(allowed)}"
        raise ValidationError(message, errors=[{"field": "file", "message": message}])

    target_dir = os.path.join(settings.UPLOAD_DIR, kind)
    name = stored_name(original_name)
    target = os.path.join(target_dir, name)

    size = 0
    try:
        os.makedirs(target_dir, exist_ok=True)
        with open(target, "wb") as out:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > settings.MAX_FILE_SIZE:
                    break
                out.write(chunk)
    except OSError as e:
        remove_file(f"/uploads/{kind}/{name}", settings)
        logger.error(f"Could not store upload {original_name}: {e}")
        raise StorageError("Could not store uploaded file") from e

    if size > settings.MAX_FILE_SIZE:
        remove_file(f"/uploads/{kind}/{name}", settings)
        raise ValidationError("File too large", errors=[{"field": "file", "message": "File too large"}])

    mime_type = getattr(upload, "content_type", None) or mimetypes.guess_type(original_name)[0] or "application/octet-stream"
    logger.info(f"Stored upload {original_name} as {name} ({size} bytes)")
    return StoredFile(
        file_name=original_name,
        file_path=f"/uploads/{kind}/{name}",
        file_size=size,
        mime_type=mime_type,
    )


def remove_file(relative_path: Optional[str], settings: Settings) -> bool:
    """Delete a stored upload. Failures are logged and reported as False, never raised."""
    if not relative_path:
        return False
    path = resolve_path(relative_path, settings)
    try:
        os.remove(path)
        return True
    except OSError as e:
        logger.warning(f"Could not delete file from filesystem: {e}")
        return False


def existing_file(relative_path: str, settings: Settings) -> str:
    path = resolve_path(relative_path or "", settings)
    if not relative_path or not os.path.isfile(path):
        raise NotFoundError("File not found on server")
    return path


@contextmanager
def discard_on_error(relative_path: Optional[str], settings: Settings):
    """Remove a freshly stored upload when the block that records it fails to save."""
    try:
        yield
    except StorageError:
        remove_file(relative_path, settings)
        raise
