"""Helpers for handling uploaded files."""

from __future__ import annotations

import os
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from werkzeug.datastructures import FileStorage
from werkzeug.exceptions import BadRequest

ALLOWED_EXTENSIONS_DEFAULT = {"jpg", "jpeg", "png", "gif", "webp"}


def allowed_extensions(configured: str | Iterable[str] | None) -> set[str]:
    """Normalize a configured list of extensions or MIME types."""

    if not configured:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    values = configured.split(",") if isinstance(configured, str) else configured

    normalized: set[str] = set()
    for raw in values:
        item = str(raw).strip().lower()
        if "/" in item:
            item = item.rsplit("/", 1)[-1]
        item = item.lstrip(".")
        if item:
            normalized.add(item)

    if not normalized:
        return set(ALLOWED_EXTENSIONS_DEFAULT)
    if "jpeg" in normalized:
        normalized.add("jpg")
    if "jpg" in normalized:
        normalized.add("jpeg")
    return normalized


def file_extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def validate_image(file: FileStorage, extensions: set[str], max_size: int) -> None:
    """Reject uploads with a disallowed extension or oversized body."""

    if not file.filename or not file.filename.strip():
        raise BadRequest("No file")

    if file_extension(file.filename) not in extensions:
        allowed = ", ".join(sorted(extensions))
        raise BadRequest(f"File type not allowed. Allowed types: {allowed}.")

    file.stream.seek(0, os.SEEK_END)
    size = file.stream.tell()
    file.stream.seek(0)
    if size > max_size:
        raise BadRequest(f"File exceeds the maximum upload size of {max_size // (1024 * 1024)}MB.")


def unique_filename(original: str, prefix: str = "") -> str:
    suffix = Path(original).suffix.lower()
    return f"{prefix}{uuid.uuid4().hex}{suffix}"


@contextmanager
def temporary_upload(file: FileStorage, directory: str | Path) -> Iterator[Path]:
    """Save an upload to a temporary file that is removed when the block exits."""

    os.makedirs(directory, exist_ok=True)
    path = Path(directory) / unique_filename(file.filename or "upload")
    try:
        file.save(path)
        yield path
    finally:
        path.unlink(missing_ok=True)
