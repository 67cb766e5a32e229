"""Tests for the S3 compatible object storage."""

import boto3
import pytest
from botocore.stub import Stubber

from brevly.errors import StorageError
from brevly.storage.s3 import S3ObjectStorage
from config import Config


@pytest.fixture
def s3_client():
    """Offline S3 client with static credentials."""
    return boto3.client(
        "s3",
        region_name="auto",
        endpoint_url="https://account.r2.cloudflarestorage.com",
        aws_access_key_id="test-key",
        aws_secret_access_key="test-secret",
    )


@pytest.fixture
def object_storage(s3_client, logger):
    """Configured storage around the stubbed client."""
    return S3ObjectStorage(
        bucket="brevly-reports",
        public_url="https://pub.example.com/",
        access_key_id="test-key",
        secret_access_key="test-secret",
        client=s3_client,
        logger=logger,
    )


class TestS3ObjectStorage:
    """Test S3 object storage."""

    async def test_upload(self, object_storage, s3_client):
        """put_object gets the body, content type, disposition and metadata."""
        with Stubber(s3_client) as stubber:
            stubber.add_response(
                "put_object",
                {"ETag": '"abc"'},
                {
                    "Bucket": "brevly-reports",
                    "Key": "reports/report.csv",
                    "Body": b"ID\n",
                    "ContentType": "text/csv",
                    "ContentDisposition": 'attachment; filename="report.csv"',
                    "Metadata": {"generated-at": "2026-01-01T00:00:00.000Z"},
                },
            )

            url = await object_storage.upload(
                key="reports/report.csv",
                body=b"ID\n",
                content_type="text/csv",
                content_disposition='attachment; filename="report.csv"',
                metadata={"generated-at": "2026-01-01T00:00:00.000Z"},
            )

            stubber.assert_no_pending_responses()

        assert url == "https://pub.example.com/reports/report.csv"

    async def test_upload_client_error(self, object_storage, s3_client):
        """Provider errors become a generic StorageError."""
        with Stubber(s3_client) as stubber:
            stubber.add_client_error("put_object", service_error_code="AccessDenied", http_status_code=403)

            with pytest.raises(StorageError) as exc_info:
                await object_storage.upload(key="reports/a.csv", body=b"x", content_type="text/csv")

        assert exc_info.value.message == "Failed to upload report to object storage"
        assert "AccessDenied" not in exc_info.value.message

    async def test_upload_not_configured(self, s3_client, logger):
        """Uploads fail fast without a bucket."""
        storage = S3ObjectStorage(bucket=None, public_url=None, client=s3_client, logger=logger)

        assert not storage.is_configured()
        with pytest.raises(StorageError, match="not configured"):
            await storage.upload(key="a.csv", body=b"x", content_type="text/csv")

    async def test_generate_download_url(self, object_storage):
        """Presigned URLs are built locally."""
        url = await object_storage.generate_download_url("reports/a.csv", expires_in=60)

        assert "reports/a.csv" in url
        assert "Expires=60" in url or "X-Amz-Expires=60" in url

    def test_r2_endpoint_from_account_id(self, logger):
        """An account id derives the R2 endpoint."""
        storage = S3ObjectStorage(
            bucket="b",
            public_url="https://pub.example.com",
            access_key_id="k",
            secret_access_key="s",
            account_id="abc123",
            logger=logger,
        )

        assert storage.endpoint_url == "https://abc123.r2.cloudflarestorage.com"
        assert storage.client.meta.endpoint_url == "https://abc123.r2.cloudflarestorage.com"

    def test_from_config(self, logger):
        """Storage settings come from Config."""
        config = Config(
            _env_file=None,
            storage_bucket="reports-bucket",
            storage_public_url="https://cdn.example.com",
            storage_access_key_id="k",
            storage_secret_access_key="s",
            storage_endpoint_url="https://s3.example.com",
        )

        storage = S3ObjectStorage.from_config(config, logger=logger)

        assert storage.is_configured()
        assert storage.bucket == "reports-bucket"
        assert storage.endpoint_url == "https://s3.example.com"
