"""Abstract base classes for Brevly link store implementations."""

import uuid
from abc import ABC, abstractmethod
from typing import AsyncContextManager, List, Optional

from .models import Link, Report


class LinkStoreTransaction(ABC):
    """Operations available inside a single store transaction.

    Used by the create path so that the original-URL lookup, the short code
    check and the insert observe one consistent snapshot.
    """

    @abstractmethod
    async def get_link_by_original_url(self, original_url: str) -> Optional[Link]:
        """Find a link by its original URL.

        Args:
            original_url: Normalized original URL

        Returns:
            The link if present, None otherwise
        """
        pass

    @abstractmethod
    async def short_code_exists(self, short_url: str) -> bool:
        """Check if a short code is already taken.

        Args:
            short_url: The short code to check

        Returns:
            True if taken, False otherwise
        """
        pass

    @abstractmethod
    async def insert_link(self, original_url: str, short_url: str) -> Link:
        """Insert a new link with a zero access count.

        Args:
            original_url: Normalized original URL
            short_url: Short code

        Returns:
            The persisted link

        Raises:
            ConflictError: If the short code was taken concurrently
            TransactionRetryError: If the transaction lost a race
        """
        pass


class LinkStoreBase(ABC):
    """Abstract base class for link and report persistence."""

    def __init__(self, db_config: str):
        """Initialize the store.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    def transaction(self) -> AsyncContextManager[LinkStoreTransaction]:
        """Open a serializable transaction.

        Commits when the block exits normally, rolls back on exception.
        """
        pass

    @abstractmethod
    async def get_link(self, link_id: uuid.UUID) -> Optional[Link]:
        """Get a link by id."""
        pass

    @abstractmethod
    async def get_link_by_short_code(self, short_url: str) -> Optional[Link]:
        """Get a link by short code."""
        pass

    @abstractmethod
    async def list_links(self, limit: int, offset: int = 0) -> List[Link]:
        """List links, newest first.

        Args:
            limit: Maximum number of links to return
            offset: Number of links to skip

        Returns:
            Page of links
        """
        pass

    @abstractmethod
    async def count_links(self) -> int:
        """Count all links."""
        pass

    @abstractmethod
    async def list_all_links(self) -> List[Link]:
        """List every link, newest first."""
        pass

    @abstractmethod
    async def delete_link(self, link_id: uuid.UUID) -> bool:
        """Delete a link.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def increment_access_count(self, link_id: uuid.UUID) -> bool:
        """Atomically add one to the access count and touch updated_at.

        Returns:
            True if a row was updated
        """
        pass

    @abstractmethod
    async def create_report(self, file_name: str, public_url: str, file_size: int) -> Report:
        """Persist report metadata."""
        pass

    @abstractmethod
    async def list_reports(self) -> List[Report]:
        """List every report, newest first."""
        pass

    @abstractmethod
    async def ensure_tables(self) -> None:
        """Create the tables if they don't exist."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the database is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass
