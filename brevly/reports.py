"""CSV usage report generation and upload."""

import csv
import io
import logging
import secrets
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .database.base import LinkStoreBase
from .database.models import Link, Report, isoformat_utc
from .errors import EmptyReportError, InternalError
from .storage.base import ObjectStorageBase


CSV_HEADER = ["ID", "Original URL", "Short URL", "Access Count", "Created At", "Updated At"]
CSV_CONTENT_TYPE = "text/csv"


def generate_file_name(now: Optional[datetime] = None) -> str:
    """Build a unique report file name.

    Format: brevly-report-<ISO timestamp, ':' and '.' as '-'>-<8 hex>.csv

    Args:
        now: Timestamp to embed (defaults to current UTC time)

    Returns:
        File name
    """
    timestamp = isoformat_utc(now or datetime.now(timezone.utc))
    timestamp = timestamp.replace(":", "-").replace(".", "-")
    return f"brevly-report-{timestamp}-{secrets.token_hex(4)}.csv"


def build_csv(links: Iterable[Link]) -> str:
    """Serialize links to CSV with a fixed column order."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for link in links:
        writer.writerow([
            str(link.id),
            link.original_url,
            link.short_url,
            link.access_count,
            isoformat_utc(link.created_at),
            isoformat_utc(link.updated_at),
        ])
    return buffer.getvalue()


class ReportGenerator:
    """Snapshots all links to CSV, uploads the file and records it."""

    def __init__(
        self,
        db: LinkStoreBase,
        storage: ObjectStorageBase,
        logger: Optional[logging.Logger] = None,
        key_prefix: str = "reports",
    ):
        """Initialize report generator.

        Args:
            db: Link store
            storage: Object storage receiving the CSV files
            logger: Optional logger
            key_prefix: Object key prefix for reports
        """
        self.db = db
        self.storage = storage
        self.logger = logger or logging.getLogger(__name__)
        self.key_prefix = key_prefix.strip("/")

    async def generate_report(self) -> Report:
        """Generate, upload and record a CSV report of every link.

        Returns:
            The persisted report

        Raises:
            EmptyReportError: If there are no links
            StorageError: If the upload fails; nothing is recorded then
            InternalError: If the report row cannot be written after upload
        """
        links = await self.db.list_all_links()
        if not links:
            raise EmptyReportError("No links found to generate a report")

        file_name = generate_file_name()
        body = build_csv(links).encode("utf-8")
        key = f"{self.key_prefix}/{file_name}" if self.key_prefix else file_name

        public_url = await self.storage.upload(
            key=key,
            body=body,
            content_type=CSV_CONTENT_TYPE,
            content_disposition=f'attachment; filename="{file_name}"',
            metadata={"generated-at": isoformat_utc(datetime.now(timezone.utc))},
        )

        try:
            report = await self.db.create_report(
                file_name=file_name,
                public_url=public_url,
                file_size=len(body),
            )
        except Exception as e:
            # Uploaded object stays behind without a reports row
            self.logger.exception(f"Uploaded {key} but failed to record it")
            raise InternalError("Report was uploaded but could not be recorded") from e

        self.logger.info(f"Generated report {file_name} with {len(links)} links ({len(body)} bytes)")
        return report

    async def list_reports(self) -> List[Report]:
        return await self.db.list_reports()
