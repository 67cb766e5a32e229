#!/usr/bin/env python3
"""
Command-line interface for the Brevly URL shortener.

Usage:
    python brevly_cli.py create <url> [--short-url CODE]
    python brevly_cli.py get <short_url>
    python brevly_cli.py list [--page N] [--limit N]
    python brevly_cli.py delete <link_id>
    python brevly_cli.py report
    python brevly_cli.py reports
    python brevly_cli.py download-url <file_name> [--expires-in SECONDS]
    python brevly_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
import uuid
from typing import Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import load_config
from brevly.database.postgres import PostgresLinkStore
from brevly.errors import BrevlyError
from brevly.reports import ReportGenerator
from brevly.service import LinkService
from brevly.shortcode import ShortCodeGenerator
from brevly.storage.s3 import S3ObjectStorage
from brevly.common.logging_config import setup_logging
from brevly.common.url_builder import build_short_url


def _print_success(payload: dict) -> int:
    print(json.dumps({"success": True, **payload}, indent=2))
    return 0


def _print_error(message: str) -> int:
    print(json.dumps({"success": False, "error": message}, indent=2), file=sys.stderr)
    return 1


class BrevlyCLI:
    """Command-line interface for Brevly."""

    def __init__(self, config, db_url: Optional[str] = None, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.db_url = db_url or config.database_url
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.db = None
        self.storage = None
        self.service = None
        self.reports = None

    async def initialize(self):
        """Initialize database, storage and services."""
        self.db = PostgresLinkStore(
            db_config=self.db_url,
            pool_max_size=2,
            connection_timeout_seconds=self.config.database_timeout_seconds,
            logger=self.logger,
        )
        self.storage = S3ObjectStorage.from_config(self.config, logger=self.logger)
        self.service = LinkService(
            db=self.db,
            short_code_generator=ShortCodeGenerator(default_length=self.config.short_code_length),
            logger=self.logger,
            max_collision_retries=self.config.max_collision_retries,
            max_transaction_retries=self.config.max_transaction_retries,
        )
        self.reports = ReportGenerator(
            db=self.db,
            storage=self.storage,
            logger=self.logger,
            key_prefix=self.config.reports_prefix,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _link_payload(self, link) -> dict:
        data = link.to_dict()
        data["link"] = build_short_url(link.short_url, self.config.base_url)
        return data

    async def create(self, url: str, short_url: Optional[str] = None) -> int:
        """Create a link, or show the existing one for the URL."""
        link, created = await self.service.create_link(url, short_url)
        return _print_success({
            "created": created,
            "link": self._link_payload(link),
        })

    async def get(self, short_url: str) -> int:
        """Look up a link by short code without counting a visit."""
        link = await self.service.get_link_by_short_code(short_url)
        return _print_success({"link": self._link_payload(link)})

    async def list_links(self, page: int, limit: int) -> int:
        """List a page of links."""
        result = await self.service.list_links(page=page, limit=limit)
        result["links"] = [self._link_payload(link) for link in result["links"]]
        return _print_success(result)

    async def delete(self, link_id: str) -> int:
        """Delete a link by id."""
        try:
            parsed = uuid.UUID(link_id)
        except ValueError:
            return _print_error(f"'{link_id}' is not a valid link id")
        await self.service.delete_link(parsed)
        return _print_success({"message": "Link deleted successfully"})

    async def report(self) -> int:
        """Generate and upload a CSV report."""
        report = await self.reports.generate_report()
        return _print_success({"report": report.to_dict()})

    async def list_reports(self) -> int:
        """List generated reports."""
        items = await self.reports.list_reports()
        return _print_success({
            "count": len(items),
            "reports": [report.to_dict() for report in items],
        })

    async def download_url(self, file_name: str, expires_in: int) -> int:
        """Presign a download URL for a report in a private bucket."""
        prefix = self.config.reports_prefix.strip("/")
        key = f"{prefix}/{file_name}" if prefix else file_name
        url = await self.storage.generate_download_url(key, expires_in=expires_in)
        return _print_success({"key": key, "url": url, "expiresIn": expires_in})

    async def health(self) -> int:
        """Check database connectivity."""
        health_status = await self.service.health_check()
        print(json.dumps({
            "success": health_status["overall"],
            "health": health_status,
            "storageConfigured": self.storage.is_configured(),
        }, indent=2))
        return 0 if health_status["overall"] else 1


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Brevly URL shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s create https://example.com/long/url

  # Shorten with a custom code
  %(prog)s create example.com/long/url --short-url mylink

  # Look up a link
  %(prog)s get mylink

  # List links
  %(prog)s list --page 2 --limit 20

  # Export a CSV report
  %(prog)s report
        """
    )

    parser.add_argument(
        "--db-url",
        default=None,
        help="PostgreSQL connection URL (default: from DATABASE_URL env or config)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a short link")
    create_parser.add_argument("url", help="URL to shorten")
    create_parser.add_argument("--short-url", help="Custom short code")

    get_parser = subparsers.add_parser("get", help="Look up a link by short code")
    get_parser.add_argument("short_url", help="Short code to look up")

    list_parser = subparsers.add_parser("list", help="List links")
    list_parser.add_argument("--page", type=int, default=1, help="Page number")
    list_parser.add_argument("--limit", type=int, default=10, help="Page size (max 100)")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("link_id", help="Link id")

    subparsers.add_parser("report", help="Generate and upload a CSV report")
    subparsers.add_parser("reports", help="List generated reports")

    download_parser = subparsers.add_parser("download-url", help="Presign a report download URL")
    download_parser.add_argument("file_name", help="Report file name")
    download_parser.add_argument("--expires-in", type=int, default=3600, help="Lifetime in seconds")

    subparsers.add_parser("health", help="Check service health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = BrevlyCLI(
        config=load_config(),
        db_url=args.db_url,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "create":
            return await cli.create(args.url, args.short_url)
        elif args.command == "get":
            return await cli.get(args.short_url)
        elif args.command == "list":
            return await cli.list_links(args.page, args.limit)
        elif args.command == "delete":
            return await cli.delete(args.link_id)
        elif args.command == "report":
            return await cli.report()
        elif args.command == "reports":
            return await cli.list_reports()
        elif args.command == "download-url":
            return await cli.download_url(args.file_name, args.expires_in)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except BrevlyError as e:
        return _print_error(e.message)
    except Exception as e:
        return _print_error(f"Unexpected error: {e}")
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
