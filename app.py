#!/usr/bin/env python3
"""
Main entry point for the Brevly URL shortener service.

Concurrency: The server handles multiple connections simultaneously via async I/O
(FastAPI + asyncpg connection pool). Set WORKERS > 1 for multi-process scaling
across CPU cores (each worker has its own DB pool).

Usage:
    python app.py

Environment variables:
    DATABASE_URL - PostgreSQL connection URL
    DATABASE_CREATE_TABLES - Set to '1' to create tables on startup
    BASE_URL - Base URL for short links
    PORT - Port to listen on (default 3333)
    WORKERS - Number of uvicorn worker processes (default 1)
    STORAGE_BUCKET, STORAGE_PUBLIC_URL, STORAGE_ACCESS_KEY_ID,
    STORAGE_SECRET_ACCESS_KEY, STORAGE_ACCOUNT_ID - Report object storage
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from brevly.database.postgres import PostgresLinkStore
from brevly.storage.s3 import S3ObjectStorage
from brevly.service import LinkService
from brevly.reports import ReportGenerator
from brevly.shortcode import ShortCodeGenerator
from brevly.common.logging_config import setup_logging
from web_app import create_app


# Global instances for graceful shutdown
db_instance = None
service_instance = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    global db_instance, service_instance

    config = app.state.config
    logger = app.state.logger

    logger.info("Starting Brevly service...")

    db_instance = PostgresLinkStore(
        db_config=config.database_url,
        pool_max_size=config.database_pool_max_size,
        connection_timeout_seconds=config.database_timeout_seconds,
        logger=logger,
    )

    if config.database_create_tables:
        logger.info("Ensuring database tables exist")
        await db_instance.ensure_tables()

    storage = S3ObjectStorage.from_config(config, logger=logger)

    generator = ShortCodeGenerator(default_length=config.short_code_length)
    service_instance = LinkService(
        db=db_instance,
        short_code_generator=generator,
        logger=logger,
        max_collision_retries=config.max_collision_retries,
        max_transaction_retries=config.max_transaction_retries,
    )
    report_instance = ReportGenerator(
        db=db_instance,
        storage=storage,
        logger=logger,
        key_prefix=config.reports_prefix,
    )

    app.state.db = db_instance
    app.state.service = service_instance
    app.state.reports = report_instance

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down Brevly service...")

    if service_instance:
        await service_instance.close()

    logger.info("Service stopped")


def build_application(config, logger) -> FastAPI:
    """Create the app with its lifespan wiring.

    Args:
        config: Configuration instance
        logger: Configured logger

    Returns:
        FastAPI app whose services are created on startup
    """
    app = create_app(
        service_instance=None,  # Set in lifespan
        report_instance=None,
        config=config,
    )

    app.state.logger = logger
    app.router.lifespan_context = lifespan

    return app


def create_application() -> FastAPI:
    """App factory imported by each uvicorn worker process."""
    config = load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    return build_application(config, logger)


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Brevly URL Shortener")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'storage_secret_access_key'})}")

    if config.workers > 1:
        # Multiple processes need an import string; uvicorn handles signals
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "app:create_application",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
        return

    uvicorn_config = uvicorn.Config(
        build_application(config, logger),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
