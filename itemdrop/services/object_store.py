"""
ItemDrop Backend - Object Store (Content Bucket)
==================================================

What:  Write-once storage for uploaded item images.
How:   `ObjectStore` defines upload(bucket, path, data, content_type).
       Two backends implement it:
         - LocalObjectStore: one directory per bucket under STORAGE_ROOT,
           written with aiofiles
         - S3ObjectStore: any S3-compatible endpoint through boto3
       `get_object_store()` builds the configured backend once per process
       and is injected into routes as a FastAPI dependency.
Who:   Called by ItemService before the item row is inserted.

Failures are raised as ObjectStorageError carrying the backend's own message.
The store never retries, reads back, or deletes an object.
"""

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path
from typing import Optional

import aiofiles
import boto3
from botocore.client import BaseClient
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool

from itemdrop.config import settings
from itemdrop.exceptions import ObjectStorageError

logger = logging.getLogger(__name__)

JPEG_CONTENT_TYPE = "image/jpeg"


class ObjectStore(ABC):
    """Interface for the content bucket collaborator."""

    @abstractmethod
    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        """Write `data` at `path` in `bucket`. Raises ObjectStorageError on failure."""
        raise NotImplementedError

    @abstractmethod
    async def health_check(self, bucket: str) -> bool:
        """Return True when `bucket` can accept writes."""
        raise NotImplementedError


class LocalObjectStore(ObjectStore):
    """
    Filesystem-backed bucket for development and single-host deployments.

    Directory Structure:
        storage/
        └── item-images/          ← bucket
            └── <user_id>/
                └── <token>.jpg

    Paths that resolve outside the bucket directory are rejected.
    """

    def __init__(self, storage_root: Optional[str] = None):
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalObjectStore initialized with storage_root=%s", self.storage_root)

    def _resolve(self, bucket: str, path: str) -> Path:
        bucket_root = (self.storage_root / bucket).resolve()
        target = (bucket_root / path).resolve()
        if bucket_root not in target.parents:
            raise ObjectStorageError(
                message=f"Invalid object path '{path}'",
                context={"bucket": bucket, "path": path},
            )
        return target

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        try:
            target = self._resolve(bucket, path)
            target.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(data)
        except (OSError, ValueError) as e:
            # ValueError: the path cannot exist on this filesystem (e.g. a NUL byte)
            logger.error("Failed to store object %s/%s: %s", bucket, path, str(e))
            raise ObjectStorageError(
                message=str(e),
                context={"bucket": bucket, "path": path},
            ) from e

        logger.info("Object stored: %s/%s (%d bytes, %s)", bucket, path, len(data), content_type)

    async def health_check(self, bucket: str) -> bool:
        bucket_root = self.storage_root / bucket
        try:
            bucket_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning("Health check: bucket directory unavailable: %s", str(e))
            return False
        return bucket_root.is_dir()


class S3ObjectStore(ObjectStore):
    """
    S3-compatible bucket (AWS S3, MinIO, or any provider exposing the S3 API).

    boto3 is synchronous; calls run in Starlette's threadpool so the event
    loop keeps serving other requests. The client is created on first use
    and shared by every request handled by this process.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        region: str = "us-east-1",
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        force_path_style: bool = False,
    ):
        self.endpoint_url = endpoint_url
        self.region = region
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.force_path_style = force_path_style
        self._client: Optional[BaseClient] = None

    @property
    def client(self) -> BaseClient:
        if self._client is None:
            client_kwargs = {}
            if self.endpoint_url:
                client_kwargs["endpoint_url"] = self.endpoint_url
            if self.force_path_style:
                # Path-style addressing is required for MinIO
                client_kwargs["config"] = Config(
                    signature_version="s3v4",
                    s3={"addressing_style": "path"},
                )
            if self.access_key_id and self.secret_access_key:
                client_kwargs["aws_access_key_id"] = self.access_key_id
                client_kwargs["aws_secret_access_key"] = self.secret_access_key
            self._client = boto3.client("s3", region_name=self.region, **client_kwargs)
        return self._client

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> None:
        try:
            await run_in_threadpool(
                self.client.put_object,
                Bucket=bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as exc:
            logger.error("Failed to upload object to s3://%s/%s: %s", bucket, path, exc)
            raise ObjectStorageError(
                message=str(exc),
                context={"bucket": bucket, "path": path},
            ) from exc

        logger.info("Object stored: s3://%s/%s (%d bytes)", bucket, path, len(data))

    async def health_check(self, bucket: str) -> bool:
        try:
            await run_in_threadpool(self.client.head_bucket, Bucket=bucket)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("Health check: bucket %s unreachable: %s", bucket, exc)
            return False
        return True


# ── Process-wide Instance ─────────────────────────────────────────────────
@lru_cache
def get_object_store() -> ObjectStore:
    """
    FastAPI dependency returning the configured object store.

    Built lazily on first request and cached for the life of the process.
    Tests substitute a fake through `app.dependency_overrides`.
    """
    if settings.storage_backend == "s3":
        logger.info("Using S3 object store (endpoint=%s)", settings.s3_endpoint_url or "aws")
        return S3ObjectStore(
            endpoint_url=settings.s3_endpoint_url,
            region=settings.s3_region,
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            force_path_style=settings.s3_force_path_style,
        )
    return LocalObjectStore(settings.storage_root)
