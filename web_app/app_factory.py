"""FastAPI application factory."""

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from brevly.errors import BrevlyError
from .api import api_router
from .api.schemas import envelope
from .web import web_router, resolve_unmatched_path
from .middleware.headers import SecurityHeadersMiddleware
from .middleware.logging import LoggingMiddleware


logger = logging.getLogger("brevly.web")


def _error_response(status_code: int, error: str, message: str = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(success=False, error=error, message=message),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map errors to the JSON envelope."""

    @app.exception_handler(BrevlyError)
    async def handle_brevly_error(request: Request, exc: BrevlyError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        detail = errors[0].get("msg") if errors else None
        return _error_response(400, "Invalid request data", detail)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            # Unmatched GET paths are tried as short code lookups first
            redirect = await resolve_unmatched_path(request)
            if redirect is not None:
                return redirect
            return _error_response(404, "Route not found")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error_response(500, "Internal server error")


def create_app(
    service_instance,
    report_instance,
    config,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        service_instance: LinkService instance (None until the lifespan sets it)
        report_instance: ReportGenerator instance (None until the lifespan sets it)
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Brevly",
        description="URL shortener with access counting and CSV usage reports",
        version="1.0.0",
        docs_url=f"{config.api_prefix}/docs",
        redoc_url=f"{config.api_prefix}/redoc",
        openapi_url=f"{config.api_prefix}/openapi.json",
    )

    # Store instances in app state for access in routes
    app.state.service = service_instance
    app.state.reports = report_instance
    app.state.config = config
    app.state.started_at = time.monotonic()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With", "Accept", "Origin"],
        expose_headers=["Content-Length", "X-Total-Count"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    # Frontend assets live under /app so they never shadow a short code
    base_path = os.path.join(os.path.dirname(__file__), "..", "ux", "web")
    css_path = os.path.join(base_path, "css")
    js_path = os.path.join(base_path, "js")

    if os.path.exists(css_path):
        app.mount("/app/css", StaticFiles(directory=css_path), name="css")
    if os.path.exists(js_path):
        app.mount("/app/js", StaticFiles(directory=js_path), name="js")

    app.include_router(api_router, prefix=config.api_prefix)
    app.include_router(web_router)

    return app
