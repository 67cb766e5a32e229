"""Abstract base class for object storage backends."""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class ObjectStorageBase(ABC):
    """Destination for generated report files."""

    @abstractmethod
    async def upload(
        self,
        key: str,
        body: bytes,
        content_type: str,
        content_disposition: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ) -> str:
        """Upload an object.

        Args:
            key: Object key (e.g. reports/file.csv)
            body: Object bytes
            content_type: MIME type stored with the object
            content_disposition: Optional Content-Disposition header
            metadata: Optional user metadata

        Returns:
            Public URL of the uploaded object

        Raises:
            StorageError: If the upload fails
        """
        pass
