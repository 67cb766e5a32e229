"""Data models for the Brevly service."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def isoformat_utc(value: Optional[datetime]) -> Optional[str]:
    """Render a timestamp as ISO-8601 UTC with milliseconds and a Z suffix.

    Naive datetimes are taken to be UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


@dataclass
class Link:
    """Represents a short code to original URL mapping."""

    id: uuid.UUID
    original_url: str
    short_url: str
    access_count: int
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        """Convert to the camelCase wire format."""
        return {
            "id": str(self.id),
            "originalUrl": self.original_url,
            "shortUrl": self.short_url,
            "accessCount": self.access_count,
            "createdAt": isoformat_utc(self.created_at),
            "updatedAt": isoformat_utc(self.updated_at),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Link":
        """Create from a database row."""
        return cls(
            id=record["id"],
            original_url=record["original_url"],
            short_url=record["short_url"],
            access_count=record["access_count"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )


@dataclass
class Report:
    """Metadata of an uploaded CSV report."""

    id: uuid.UUID
    file_name: str
    public_url: str
    file_size: int
    created_at: datetime

    def to_dict(self) -> dict:
        """Convert to the camelCase wire format."""
        return {
            "id": str(self.id),
            "fileName": self.file_name,
            "publicUrl": self.public_url,
            "fileSize": self.file_size,
            "createdAt": isoformat_utc(self.created_at),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Report":
        """Create from a database row."""
        return cls(
            id=record["id"],
            file_name=record["file_name"],
            public_url=record["public_url"],
            file_size=record["file_size"],
            created_at=record["created_at"],
        )
