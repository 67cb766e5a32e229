"""Pydantic schemas for API requests and responses."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field, field_validator


T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every JSON response."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    message: Optional[str] = None


def envelope(
    data=None,
    message: Optional[str] = None,
    error: Optional[str] = None,
    success: bool = True,
) -> dict:
    """Build a JSON-ready envelope, leaving out unset fields."""
    return ApiResponse(
        success=success,
        data=data,
        error=error,
        message=message,
    ).model_dump(mode="json", exclude_none=True)


class CreateLinkRequest(BaseModel):
    """Request to create a short link."""

    originalUrl: str = Field(..., description="The URL to shorten; https:// is assumed when no scheme is given")
    shortUrl: Optional[str] = Field(None, description="Optional custom short code (3-20 letters, digits, hyphens)")

    @field_validator("shortUrl")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """An empty short code means 'generate one'."""
        if v is not None and not v.strip():
            return None
        return v

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "originalUrl": "https://example.com/very/long/path/to/resource",
                },
                {
                    "originalUrl": "example.com/page",
                    "shortUrl": "mylink"
                }
            ]
        }
    }


class LinkData(BaseModel):
    """A link as returned by the API."""

    id: str
    originalUrl: str
    shortUrl: str
    accessCount: int
    createdAt: str
    updatedAt: str


class LinksListData(BaseModel):
    """A page of links."""

    links: List[LinkData]
    total: int
    page: int
    limit: int
    totalPages: int


class ReportData(BaseModel):
    """Metadata of a generated CSV report."""

    id: str
    fileName: str
    publicUrl: str
    fileSize: int
    createdAt: str


class HealthData(BaseModel):
    """Health check payload."""

    status: str = Field(..., description="Overall status")
    timestamp: str = Field(..., description="Check timestamp")
    database: str = Field(..., description="connected or disconnected")
    uptime: float = Field(..., description="Seconds since the app was created")
