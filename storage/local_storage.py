"""Local filesystem avatar storage."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

from werkzeug.utils import secure_filename

from .abstract_storage import AbstractAvatarStorage, StorageError

logger = logging.getLogger(__name__)


class LocalAvatarStorage(AbstractAvatarStorage):
    """Copy avatars into a directory served by the application itself."""

    def __init__(self, avatar_dir: str | Path, base_url: str):
        self.base_directory = Path(avatar_dir)
        self.base_url = base_url.rstrip("/")
        os.makedirs(self.base_directory, exist_ok=True)

    def upload(self, source: Path, filename: str) -> str:
        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")

        destination = self.base_directory / safe_name
        try:
            shutil.copyfile(source, destination)
        except OSError as exc:
            logger.exception("Could not store avatar %s", safe_name)
            raise StorageError(f"Could not store avatar {safe_name}") from exc

        return f"{self.base_url}/{self.folder}/{safe_name}"

    def path_for(self, filename: str) -> Path:
        """Return the on-disk location of a stored avatar."""

        return self.base_directory / secure_filename(filename)
