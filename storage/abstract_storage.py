"""Avatar storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class StorageError(Exception):
    """Raised when the avatar store rejects or fails an upload."""


class AbstractAvatarStorage(ABC):
    """Interface for avatar storage backends."""

    folder = "avatars"

    @abstractmethod
    def upload(self, source: Path, filename: str) -> str:
        """Store the file at ``source`` under ``filename`` and return its public URL."""
