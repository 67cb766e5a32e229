"""S3 compatible object storage (AWS S3, Cloudflare R2)."""

import asyncio
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import StorageError
from .base import ObjectStorageBase


class S3ObjectStorage(ObjectStorageBase):
    """Uploads objects with boto3 and builds their public URLs."""

    def __init__(
        self,
        bucket: Optional[str],
        public_url: Optional[str],
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        account_id: Optional[str] = None,
        region: str = "auto",
        client: Optional[Any] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize S3 storage.

        Args:
            bucket: Bucket name
            public_url: Public base URL serving the bucket
            access_key_id: Access key id
            secret_access_key: Secret access key
            endpoint_url: Explicit endpoint; derived from account_id for R2 if omitted
            account_id: Cloudflare account id
            region: Region name ("auto" for R2)
            client: Pre-built boto3 S3 client (tests)
            logger: Optional logger instance
        """
        self.bucket = bucket
        self.public_url = (public_url or "").rstrip("/")
        self.access_key_id = access_key_id
        self.secret_access_key = secret_access_key
        self.logger = logger or logging.getLogger(__name__)

        if not endpoint_url and account_id:
            endpoint_url = f"https://{account_id}.r2.cloudflarestorage.com"
        self.endpoint_url = endpoint_url

        self.client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
        )

        if not self.is_configured():
            self.logger.warning("Object storage is not fully configured - report uploads will fail")

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> "S3ObjectStorage":
        """Build from the application Config."""
        return cls(
            bucket=config.storage_bucket,
            public_url=config.storage_public_url,
            access_key_id=config.storage_access_key_id,
            secret_access_key=config.storage_secret_access_key,
            endpoint_url=config.storage_endpoint_url,
            account_id=config.storage_account_id,
            region=config.storage_region,
            logger=logger,
        )

    def is_configured(self) -> bool:
        """Check that bucket, credentials and public URL are all set."""
        return bool(
            self.bucket
            and self.public_url
            and self.access_key_id
            and self.secret_access_key
        )

    async def upload(
        self,
        key: str,
        body: bytes,
        content_type: str,
        content_disposition: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        if not self.bucket or not self.public_url:
            raise StorageError("Object storage is not configured")

        params: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if content_disposition:
            params["ContentDisposition"] = content_disposition
        if metadata:
            params["Metadata"] = metadata

        try:
            # boto3 is blocking; keep the event loop free
            await asyncio.to_thread(self.client.put_object, **params)
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Upload of {key} failed: {e}")
            raise StorageError("Failed to upload report to object storage") from e

        public_url = f"{self.public_url}/{key}"
        self.logger.info(f"Uploaded {key} ({len(body)} bytes) to {public_url}")
        return public_url

    async def generate_download_url(self, key: str, expires_in: int = 3600) -> str:
        """Generate a presigned GET URL for a private bucket.

        Args:
            key: Object key
            expires_in: Lifetime in seconds

        Returns:
            Presigned URL
        """
        try:
            return await asyncio.to_thread(
                self.client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            self.logger.error(f"Presigning {key} failed: {e}")
            raise StorageError("Failed to generate download URL") from e
