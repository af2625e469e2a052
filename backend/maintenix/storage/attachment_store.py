"""Attachment storage: photo blobs in an S3-compatible bucket (AWS S3 or MinIO).

Objects are addressed by path and handed back as public URLs of the form
``{public_base}/{bucket}/{object_name}``. boto3 is blocking, so every call
goes through asyncio.to_thread().
"""

import asyncio
from typing import Any, Protocol

import boto3
import structlog
from botocore.exceptions import ClientError

from maintenix.core.config import Settings

logger = structlog.get_logger(__name__)


class AttachmentStore(Protocol):
    """Blob storage capability used by the attachment service."""

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` at ``path`` and return its public URL."""
        ...

    async def delete(self, url: str) -> None:
        """Delete the object behind ``url``; unknown URLs are ignored."""
        ...


class S3AttachmentStore:
    """AttachmentStore backed by an S3-compatible bucket.

    Usage:
        store = S3AttachmentStore.from_settings(get_settings())
        url = await store.put("maintenance-records/.../photo.jpg", data, "image/jpeg")
        await store.delete(url)
    """

    def __init__(
        self,
        bucket: str,
        public_base_url: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        client: Any = None,
    ) -> None:
        self._bucket = bucket
        self._region = region
        self._public_base_url = public_base_url.rstrip("/")
        self._endpoint_url = endpoint_url or None
        self._access_key = access_key or None
        self._secret_key = secret_key or None
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3AttachmentStore":
        public_base = (
            settings.storage_public_url
            or settings.storage_endpoint_url
            or f"https://s3.{settings.storage_region}.amazonaws.com"
        )
        return cls(
            bucket=settings.storage_bucket,
            public_base_url=public_base,
            region=settings.storage_region,
            endpoint_url=settings.storage_endpoint_url,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
        )

    @property
    def bucket(self) -> str:
        return self._bucket

    def _s3(self) -> Any:
        if self._client is None:
            self._client = boto3.client(
                "s3",
                region_name=self._region,
                endpoint_url=self._endpoint_url,
                aws_access_key_id=self._access_key,
                aws_secret_access_key=self._secret_key,
            )
        return self._client

    def public_url(self, object_name: str) -> str:
        return f"{self._public_base_url}/{self._bucket}/{object_name}"

    def object_name_from_url(self, url: str) -> str | None:
        """Return the object name for one of our URLs, None for anything else."""
        prefix = f"{self._public_base_url}/{self._bucket}/"
        if not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    async def ensure_bucket(self) -> None:
        """Create the bucket if it does not exist yet."""
        s3 = self._s3()
        try:
            await asyncio.to_thread(s3.head_bucket, Bucket=self._bucket)
        except ClientError:
            kwargs: dict[str, Any] = {"Bucket": self._bucket}
            if self._region and self._region != "us-east-1":
                kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
            await asyncio.to_thread(s3.create_bucket, **kwargs)
            logger.info("storage_bucket_created", bucket=self._bucket)

    async def put(self, path: str, data: bytes, content_type: str) -> str:
        await asyncio.to_thread(
            self._s3().put_object,
            Bucket=self._bucket,
            Key=path,
            Body=data,
            ContentType=content_type,
        )
        return self.public_url(path)

    async def delete(self, url: str) -> None:
        object_name = self.object_name_from_url(url)
        if object_name is None:
            logger.info("storage_delete_skipped", reason="foreign_url", url=url)
            return
        await asyncio.to_thread(self._s3().delete_object, Bucket=self._bucket, Key=object_name)
