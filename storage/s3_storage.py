"""S3-compatible avatar storage."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .abstract_storage import AbstractAvatarStorage, StorageError

logger = logging.getLogger(__name__)


class S3AvatarStorage(AbstractAvatarStorage):
    """Upload avatars to an S3 or MinIO bucket with public-read access."""

    def __init__(
        self,
        bucket: str,
        *,
        endpoint_url: str | None = None,
        region: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        public_url: str | None = None,
        client: Any = None,
    ):
        self.bucket = bucket
        self.region = region or "us-east-1"
        self.public_url = (public_url or endpoint_url or "").rstrip("/")
        self.client = client or boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=self.region,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        )

    def _object_url(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def upload(self, source: Path, filename: str) -> str:
        key = f"{self.folder}/{filename}"
        content_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        try:
            self.client.upload_file(
                str(source),
                self.bucket,
                key,
                ExtraArgs={"ContentType": content_type, "ACL": "public-read"},
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to upload avatar %s to bucket %s: %s", key, self.bucket, exc)
            raise StorageError(f"Failed to upload {key}") from exc

        return self._object_url(key)
