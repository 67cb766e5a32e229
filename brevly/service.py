"""Business logic service for the Brevly URL shortener."""

import logging
import math
import uuid
from typing import Any, Dict, Optional, Tuple

from .shortcode import ShortCodeGenerator
from .database.base import LinkStoreBase, LinkStoreTransaction
from .database.models import Link
from .common.validators import is_valid_short_code, validate_url, validate_short_code
from .errors import (
    ConflictError,
    NotFoundError,
    TransactionRetryError,
    ValidationError,
)


DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class LinkService:
    """Service layer for link creation, lookup and resolution."""

    def __init__(
        self,
        db: LinkStoreBase,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 3,
        max_transaction_retries: int = 2,
    ):
        """Initialize link service.

        Args:
            db: Link store
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Re-draws of a generated code that is taken
            max_transaction_retries: Re-runs of a create transaction that lost a race
        """
        self.db = db
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self.max_transaction_retries = max_transaction_retries

    async def create_link(
        self,
        original_url: str,
        short_url: Optional[str] = None,
    ) -> Tuple[Link, bool]:
        """Create a link, or return the one already pointing at the URL.

        Args:
            original_url: The original URL; normalized before use
            short_url: Optional explicit short code

        Returns:
            Tuple of (link, created). created is False when an existing link
            for the same original URL was returned.

        Raises:
            ValidationError: If the URL or short code is malformed
            ConflictError: If the short code is taken
        """
        url = validate_url(original_url)
        if short_url is not None:
            validate_short_code(short_url)

        for attempt in range(self.max_transaction_retries + 1):
            try:
                async with self.db.transaction() as tx:
                    link, created = await self._create_in_transaction(tx, url, short_url)
            except TransactionRetryError:
                if attempt >= self.max_transaction_retries:
                    raise ConflictError("Link could not be created due to a concurrent update, try again")
                self.logger.warning(f"Retrying create for {url} (attempt {attempt + 2})")
                continue

            if created:
                self.logger.info(f"Created link: {link.short_url} -> {link.original_url}")
            else:
                self.logger.info(f"Reusing link {link.short_url} for {link.original_url}")
            return link, created

    async def _create_in_transaction(
        self,
        tx: LinkStoreTransaction,
        url: str,
        short_url: Optional[str],
    ) -> Tuple[Link, bool]:
        existing = await tx.get_link_by_original_url(url)
        if existing:
            return existing, False

        if short_url is not None:
            if await tx.short_code_exists(short_url):
                raise ConflictError(f"Short code '{short_url}' already exists")
            code = short_url
        else:
            code = await self._generate_short_code(tx)

        link = await tx.insert_link(url, code)
        return link, True

    async def _generate_short_code(self, tx: LinkStoreTransaction) -> str:
        """Draw a random code, re-drawing a bounded number of times.

        A draw is rejected when it is taken or fails short code validation.
        """
        for attempt in range(self.max_collision_retries + 1):
            code = self.generator.generate_random()
            valid, _ = is_valid_short_code(code)
            if not valid:
                # A reserved word would be shadowed by a fixed route
                self.logger.warning(f"Generated short code is not usable: {code}")
                continue
            if not await tx.short_code_exists(code):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code
            self.logger.warning(f"Generated short code collided: {code}")

        raise ConflictError("Unable to generate a unique short code, try again")

    async def list_links(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Dict[str, Any]:
        """List a page of links, newest first.

        Args:
            page: 1-based page number
            limit: Page size, capped at 100

        Returns:
            Dictionary with links, total, page, limit, totalPages
        """
        if page < 1:
            raise ValidationError("page must be a positive integer")
        if limit < 1:
            raise ValidationError("limit must be a positive integer")
        limit = min(limit, MAX_LIMIT)

        links = await self.db.list_links(limit=limit, offset=(page - 1) * limit)
        total = await self.db.count_links()

        return {
            "links": links,
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit),
        }

    async def get_link(self, link_id: uuid.UUID) -> Link:
        link = await self.db.get_link(link_id)
        if not link:
            raise NotFoundError("Link not found")
        return link

    async def get_link_by_short_code(self, short_url: str) -> Link:
        link = await self.db.get_link_by_short_code(short_url)
        if not link:
            raise NotFoundError("Link not found")
        return link

    async def delete_link(self, link_id: uuid.UUID) -> None:
        if not await self.db.delete_link(link_id):
            raise NotFoundError("Link not found")
        self.logger.info(f"Deleted link {link_id}")

    async def resolve(self, short_url: str) -> Optional[str]:
        """Resolve a short code to its original URL and count the visit.

        The increment is awaited so the stored count reflects the visit by
        the time the redirect goes out, but a failed increment never blocks
        the redirect.

        Args:
            short_url: The short code

        Returns:
            Original URL, or None if the code is unknown
        """
        link = await self.db.get_link_by_short_code(short_url)
        if not link:
            self.logger.warning(f"Short code not found: {short_url}")
            return None

        try:
            await self.db.increment_access_count(link.id)
        except Exception:
            self.logger.exception(f"Failed to increment access count for {short_url}")

        self.logger.debug(f"Resolved {short_url} -> {link.original_url}")
        return link.original_url

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.db.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close service connections."""
        await self.db.close()
