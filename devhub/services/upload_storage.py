# upload_storage.py
from __future__ import annotations

import logging
import random
import re
import time
from pathlib import Path, PurePosixPath

from fastapi import UploadFile

from devhub.config import get_upload_root, settings


logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/webm",
    "video/quicktime",
    "application/pdf",
    "text/plain",
)

PUBLIC_PREFIX = "/uploads/projects"
FIELD_NAME = "files"

_CHUNK_SIZE = 1024 * 1024
_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


class FileTooLargeError(ValueError):
    pass


def classify_mime(mime_type: str) -> str:
    if mime_type.startswith("image/"):
        return "image"
    if mime_type.startswith("video/"):
        return "video"
    if mime_type == "application/pdf":
        return "document"
    return "other"


def is_allowed(mime_type: str | None) -> bool:
    return (mime_type or "") in ALLOWED_MIME_TYPES


def projects_dir() -> Path:
    directory = get_upload_root(settings) / "projects"
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def stored_name(original_name: str) -> str:
    original = PurePosixPath((original_name or "").replace("\\", "/")).name
    suffix = PurePosixPath(original).suffix
    base = original[: -len(suffix)] if suffix else original
    unique = f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}"
    return f"{FIELD_NAME}-{unique}-{_UNSAFE_CHARS.sub('_', base)}{suffix}"


def public_path(name: str) -> str:
    return f"{PUBLIC_PREFIX}/{name}"


def disk_path(file_path: str) -> Path:
    name = PurePosixPath(file_path).name
    return get_upload_root(settings) / "projects" / name


def save_upload(upload: UploadFile, max_size: int) -> tuple[str, int]:
    """Stream one upload to disk. Returns (stored file name, size in bytes)."""
    name = stored_name(upload.filename or "file")
    target = projects_dir() / name
    size = 0
    with target.open("wb") as out:
        while True:
            chunk = upload.file.read(_CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_size:
                break
            out.write(chunk)

    if size > max_size:
        target.unlink(missing_ok=True)
        limit = f"{max_size // (1024 * 1024)}MB" if max_size >= 1024 * 1024 else f"{max_size} byte"
        raise FileTooLargeError(f"File {upload.filename} exceeds the {limit} limit")
    return name, size


def remove_stored_file(file_path: str) -> None:
    path = disk_path(file_path)
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("upload.remove failed path=%s", path, exc_info=True)
