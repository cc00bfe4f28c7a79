"""Avatar storage backends."""

from .abstract_storage import AbstractAvatarStorage, StorageError
from .local_storage import LocalAvatarStorage
from .s3_storage import S3AvatarStorage

__all__ = ["AbstractAvatarStorage", "LocalAvatarStorage", "S3AvatarStorage", "StorageError"]
