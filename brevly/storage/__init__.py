"""Object storage for generated reports."""

from .base import ObjectStorageBase
from .s3 import S3ObjectStorage

__all__ = ["ObjectStorageBase", "S3ObjectStorage"]
