"""S3-compatible image storage (AWS S3, MinIO, etc.)."""

from __future__ import annotations

import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from lms.application.dtos.media import ImageUpload, StoredImage
from lms.infrastructure.exceptions import StorageDeleteError, StorageUploadError
from lms.infrastructure.external.storage.naming import image_public_id

logger = logging.getLogger(__name__)


class S3StorageService:
    """S3-compatible storage with server-side encryption.

    Uses boto3 (sync) via asyncio.to_thread for async API. Compatible with
    AWS S3, MinIO, DigitalOcean Spaces. Objects are publicly addressable by URL.
    """

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
    ) -> None:
        """Initialize S3 client.

        Args:
            bucket: Bucket name.
            region: AWS region.
            endpoint_url: Custom endpoint (MinIO/Spaces).
            access_key: Optional; uses env/IAM if not set.
            secret_key: Optional.
        """
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url.rstrip("/") if endpoint_url else None
        extra = {} if endpoint_url is None else {"endpoint_url": endpoint_url}
        self._client = boto3.client(
            "s3",
            region_name=region,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            **extra,
        )

    def url_for(self, key: str) -> str:
        if self.endpoint_url:
            return f"{self.endpoint_url}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    async def upload(self, image: ImageUpload, folder: str) -> StoredImage:
        """Put object and return its key (public id) and URL."""
        key = image_public_id(folder, image.filename, image.content_type)

        def _put() -> None:
            self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=image.content,
                ContentType=image.content_type,
                ServerSideEncryption="AES256",
            )

        try:
            await asyncio.to_thread(_put)
        except (ClientError, BotoCoreError) as e:
            raise StorageUploadError(key, str(e)) from e
        logger.info("Uploaded image s3://%s/%s", self.bucket, key)
        return StoredImage(public_id=key, url=self.url_for(key))

    async def destroy(self, public_id: str) -> bool:
        """Delete object. Returns False if it did not exist."""

        def _delete() -> bool:
            try:
                self._client.head_object(Bucket=self.bucket, Key=public_id)
            except ClientError as e:
                if e.response["Error"]["Code"] in ("404", "NoSuchKey"):
                    return False
                raise
            self._client.delete_object(Bucket=self.bucket, Key=public_id)
            return True

        try:
            return await asyncio.to_thread(_delete)
        except (ClientError, BotoCoreError) as e:
            raise StorageDeleteError(public_id, str(e)) from e
