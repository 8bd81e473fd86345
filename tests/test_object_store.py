"""
ItemDrop Backend - Object Store Unit Tests
============================================

What:  Tests for LocalObjectStore, S3ObjectStore and the get_object_store factory.
How:   Local tests write into a temporary directory; S3 tests use a mocked
       boto3 client (no network).
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from itemdrop.exceptions import ObjectStorageError
from itemdrop.services.object_store import (
    LocalObjectStore,
    S3ObjectStore,
    get_object_store,
)


class TestLocalObjectStore:

    @pytest.mark.asyncio
    async def test_upload_writes_file_under_bucket(self, temp_storage, sample_image_bytes):
        store = LocalObjectStore(temp_storage)

        await store.upload("item-images", "u1/abc.jpg", sample_image_bytes, "image/jpeg")

        written = store.storage_root / "item-images" / "u1" / "abc.jpg"
        assert written.read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_path_escaping_bucket_rejected(self, temp_storage):
        store = LocalObjectStore(temp_storage)

        with pytest.raises(ObjectStorageError, match="Invalid object path"):
            await store.upload("item-images", "../../etc/x.jpg", b"data", "image/jpeg")

    @pytest.mark.asyncio
    async def test_os_error_becomes_storage_error(self, temp_storage):
        store = LocalObjectStore(temp_storage)

        with patch("aiofiles.open", side_effect=OSError("No space left on device")):
            with pytest.raises(ObjectStorageError, match="No space left on device"):
                await store.upload("item-images", "u1/abc.jpg", b"data", "image/jpeg")

    @pytest.mark.asyncio
    async def test_unrepresentable_path_becomes_storage_error(self, temp_storage):
        store = LocalObjectStore(temp_storage)

        with pytest.raises(ObjectStorageError, match="embedded null byte"):
            await store.upload("item-images", "u\x00x/abc.jpg", b"data", "image/jpeg")

    @pytest.mark.asyncio
    async def test_health_check(self, temp_storage):
        store = LocalObjectStore(temp_storage)
        assert await store.health_check("item-images") is True


class TestS3ObjectStore:

    def setup_method(self):
        self.store = S3ObjectStore(
            endpoint_url="http://minio:9000",
            access_key_id="key",
            secret_access_key="secret",
            force_path_style=True,
        )
        self.client = MagicMock()
        self.store._client = self.client

    @pytest.mark.asyncio
    async def test_upload_puts_object(self, sample_image_bytes):
        await self.store.upload("item-images", "u1/abc.jpg", sample_image_bytes, "image/jpeg")

        self.client.put_object.assert_called_once_with(
            Bucket="item-images",
            Key="u1/abc.jpg",
            Body=sample_image_bytes,
            ContentType="image/jpeg",
        )

    @pytest.mark.asyncio
    async def test_client_error_becomes_storage_error(self):
        self.client.put_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchBucket", "Message": "The specified bucket does not exist"}},
            "PutObject",
        )

        with pytest.raises(ObjectStorageError, match="The specified bucket does not exist"):
            await self.store.upload("item-images", "u1/abc.jpg", b"data", "image/jpeg")
        self.client.put_object.assert_called_once()

    @pytest.mark.asyncio
    async def test_health_check_failure(self):
        self.client.head_bucket.side_effect = ClientError(
            {"Error": {"Code": "403", "Message": "Forbidden"}}, "HeadBucket"
        )
        assert await self.store.health_check("item-images") is False

    def test_client_built_once_with_endpoint(self):
        store = S3ObjectStore(
            endpoint_url="http://minio:9000",
            access_key_id="key",
            secret_access_key="secret",
        )
        with patch("itemdrop.services.object_store.boto3.client") as mock_client:
            first = store.client
            second = store.client

        assert first is second
        mock_client.assert_called_once_with(
            "s3",
            region_name="us-east-1",
            endpoint_url="http://minio:9000",
            aws_access_key_id="key",
            aws_secret_access_key="secret",
        )


class TestGetObjectStore:

    def teardown_method(self):
        get_object_store.cache_clear()

    def test_local_backend_is_singleton(self):
        get_object_store.cache_clear()
        first = get_object_store()
        assert isinstance(first, LocalObjectStore)
        assert get_object_store() is first

    def test_s3_backend_selected(self):
        get_object_store.cache_clear()
        with patch("itemdrop.services.object_store.settings") as mock_settings:
            mock_settings.storage_backend = "s3"
            mock_settings.s3_endpoint_url = "http://minio:9000"
            mock_settings.s3_region = "eu-north-1"
            mock_settings.s3_access_key_id = "key"
            mock_settings.s3_secret_access_key = "secret"
            mock_settings.s3_force_path_style = True
            store = get_object_store()

        assert isinstance(store, S3ObjectStore)
        assert store.region == "eu-north-1"
        assert store.force_path_style is True
