"""Object storage service.

Stores file bytes in an S3-compatible bucket (AWS S3, Supabase Storage's S3
endpoint, MinIO, ...) through boto3. boto3 is blocking, so every call runs in
the default thread pool.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from functools import partial

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.exceptions.storage import ObjectStorageError

logger = logging.getLogger(__name__)

UPLOAD_PREFIX = "uploads"


@dataclass(frozen=True)
class StoredObject:
    path: str
    url: str


class ObjectStorageService:
    """Upload, delete and resolve URLs for stored file bytes."""

    def __init__(self, client=None, bucket_name: str | None = None):
        self.bucket_name = bucket_name or settings.s3_bucket_name
        self.client = client or boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
        )

    @staticmethod
    def build_object_path(file_name: str) -> str:
        """Unique object key that keeps the original extension."""
        extension = file_name.rsplit(".", 1)[-1] if file_name else ""
        return f"{UPLOAD_PREFIX}/{uuid.uuid4()}.{extension}"

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))

    async def upload_file(self, data: bytes, file_name: str, mime_type: str) -> StoredObject:
        """Store ``data`` under a new unique path and return its path and URL."""
        path = self.build_object_path(file_name)
        try:
            await self._run(
                self.client.put_object,
                Bucket=self.bucket_name,
                Key=path,
                Body=data,
                ContentType=mime_type or "application/octet-stream",
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to upload '{file_name}' to {self.bucket_name}/{path}: {str(e)}")
            raise ObjectStorageError(f"Failed to upload file: {str(e)}") from e

        url = await self.get_file_url(path)
        logger.info(f"Stored '{file_name}' at {self.bucket_name}/{path}")
        return StoredObject(path=path, url=url)

    async def delete_file(self, path: str) -> bool:
        """Remove the object at ``path``. Returns False instead of raising."""
        try:
            await self._run(self.client.delete_object, Bucket=self.bucket_name, Key=path)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to delete object {self.bucket_name}/{path}: {str(e)}")
            return False

    async def get_file_url(self, path: str) -> str:
        """Public URL when a public base is configured, otherwise a presigned GET URL."""
        if settings.s3_public_base_url:
            return f"{settings.s3_public_base_url.rstrip('/')}/{self.bucket_name}/{path}"

        try:
            return await self._run(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": path},
                ExpiresIn=settings.presigned_url_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            raise ObjectStorageError(f"Failed to build file URL: {str(e)}") from e
