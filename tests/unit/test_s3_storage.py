"""Tests for the S3 backend."""

import pytest
from boto3.exceptions import Boto3Error
from botocore.exceptions import ClientError

from neo_uploads import Artifact, StorageError, StoredFile, UploadSettings, UrlResolver
from neo_uploads.infrastructure.storage.s3_storage import (
    S3Storage,
    normalize_acl,
    object_extra_args,
)

from conftest import ImageDefinition


class PublicThumbDefinition(ImageDefinition):
    def acl(self, version, artifact, scope):
        return "public_read" if version == "thumb" else "private"

    def s3_object_headers(self, version, artifact, scope):
        return {"content_type": "image/png", "cache_control": "max-age=60"}


class TestS3Storage:
    """Test S3 uploads, URLs and deletes against a mocked client."""

    @pytest.fixture
    def client(self, mocker):
        client = mocker.MagicMock()
        client.generate_presigned_url.return_value = "https://signed.example.com/x"
        return client

    @pytest.fixture
    def storage(self, client, settings):
        return S3Storage(client=client, settings=settings)

    @pytest.fixture
    def definition(self, settings, storage):
        return PublicThumbDefinition(settings=settings, storage=storage)

    @pytest.mark.asyncio
    async def test_put_path_uses_upload_file(self, storage, definition, client, source_file):
        artifact = Artifact(file_name="thumb_image.png", path=source_file)
        assert await storage.put(definition, "thumb", artifact, None) == "thumb_image.png"

        client.upload_file.assert_called_once_with(
            source_file,
            "my-bucket",
            "uploads/thumb_image.png",
            ExtraArgs={
                "ContentType": "image/png",
                "CacheControl": "max-age=60",
                "ACL": "public-read",
            },
        )

    @pytest.mark.asyncio
    async def test_put_binary_uses_put_object(self, storage, definition, client):
        artifact = Artifact(file_name="original_image.png", binary=b"data")
        await storage.put(definition, "original", artifact, None)

        kwargs = client.put_object.call_args.kwargs
        assert kwargs["Bucket"] == "my-bucket"
        assert kwargs["Key"] == "uploads/original_image.png"
        assert kwargs["Body"] == b"data"
        assert kwargs["ACL"] == "private"

    @pytest.mark.asyncio
    async def test_put_client_error(self, storage, definition, client, source_file):
        client.upload_file.side_effect = ClientError(
            {"Error": {"Code": "NoSuchBucket", "Message": "missing"}}, "PutObject"
        )
        with pytest.raises(StorageError) as exc_info:
            await storage.put(definition, "thumb", Artifact("thumb_image.png", path=source_file), None)
        assert exc_info.value.version == "thumb"
        assert exc_info.value.backend == "s3"

    @pytest.mark.asyncio
    async def test_put_without_bucket(self, client, tmp_dir, source_file):
        settings = UploadSettings(tmp_dir=str(tmp_dir), bucket=None)
        storage = S3Storage(client=client, settings=settings)
        definition = ImageDefinition(settings=settings, storage=storage)
        with pytest.raises(StorageError):
            await storage.put(definition, "original", Artifact("a.png", path=source_file), None)
        client.upload_file.assert_not_called()

    def test_path_style_url(self, storage, definition):
        assert storage.url(definition, "thumb", StoredFile("x y.png"), None) == (
            "https://s3.amazonaws.com/my-bucket/uploads/thumb_x%20y.png"
        )

    def test_virtual_host_url(self, client, tmp_dir):
        settings = UploadSettings(tmp_dir=str(tmp_dir), bucket="my-bucket", virtual_host=True)
        storage = S3Storage(client=client, settings=settings)
        definition = ImageDefinition(settings=settings, storage=storage)
        assert storage.url(definition, "original", StoredFile("image.png"), None) == (
            "https://my-bucket.s3.amazonaws.com/uploads/original_image.png"
        )

    def test_asset_host_url(self, client, tmp_dir):
        settings = UploadSettings(tmp_dir=str(tmp_dir), bucket="b", asset_host="https://cdn.example.com")
        storage = S3Storage(client=client, settings=settings)
        definition = ImageDefinition(settings=settings, storage=storage)
        assert storage.url(definition, "original", StoredFile("image.png"), None) == (
            "https://cdn.example.com/uploads/original_image.png"
        )

    def test_signed_url_default_expiry(self, storage, definition, client):
        url = storage.url(definition, "thumb", StoredFile("image.png"), None, {"signed": True})

        assert url == "https://signed.example.com/x"
        client.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={"Bucket": "my-bucket", "Key": "uploads/thumb_image.png"},
            ExpiresIn=300,
        )

    def test_signed_url_expire_in_alias(self, definition, client):
        UrlResolver(definition).url("image.png", signed=True, expire_in=60)
        assert client.generate_presigned_url.call_args.kwargs["ExpiresIn"] == 60

    @pytest.mark.asyncio
    async def test_delete(self, storage, definition, client):
        await storage.delete(definition, "thumb", StoredFile("image.png"), None)
        client.delete_object.assert_called_once_with(Bucket="my-bucket", Key="uploads/thumb_image.png")

    @pytest.mark.asyncio
    async def test_delete_error(self, storage, definition, client):
        client.delete_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject"
        )
        with pytest.raises(StorageError):
            await storage.delete(definition, "thumb", StoredFile("image.png"), None)

    @pytest.mark.asyncio
    async def test_delete_boto3_error(self, storage, definition, client):
        client.delete_object.side_effect = Boto3Error("transfer failed")
        with pytest.raises(StorageError) as exc_info:
            await storage.delete(definition, "thumb", StoredFile("image.png"), None)
        assert exc_info.value.version == "thumb"


def test_normalize_acl():
    assert normalize_acl("public_read") == "public-read"
    assert normalize_acl("bucket-owner-full-control") == "bucket-owner-full-control"


def test_object_extra_args():
    assert object_extra_args([("encryption", "AES256"), ("ContentType", "image/png")]) == {
        "ServerSideEncryption": "AES256",
        "ContentType": "image/png",
    }
