"""Web interface and redirect routes implementation."""

import os
import time
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates

from brevly.common.url_builder import build_base_url
from brevly.common.validators import is_candidate_short_code
from brevly.database.models import isoformat_utc
from ..api.schemas import ApiResponse, HealthData, envelope

router = APIRouter()

# Setup Jinja2 templates
template_dir = os.path.join(os.path.dirname(__file__), "..", "..", "ux", "web")
templates = Jinja2Templates(directory=template_dir)


def _base_url(request: Request) -> str:
    return build_base_url(
        headers=request.headers,
        fallback_base_url=request.app.state.config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
        trust_forwarded=request.app.state.config.trust_forwarded_headers,
    )


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the link management page."""
    config = request.app.state.config
    return templates.TemplateResponse(
        request,
        "index.html",
        {"api_prefix": config.api_prefix, "base_url": _base_url(request)},
    )


@router.get("/app/not-found", response_class=HTMLResponse, include_in_schema=False)
async def not_found_page(request: Request):
    """Friendly page unknown short codes are sent to."""
    return templates.TemplateResponse(request, "not_found.html", {}, status_code=404)


@router.get("/app/r/{short_url}", response_class=HTMLResponse, include_in_schema=False)
async def redirect_page(request: Request, short_url: str):
    """Client-side redirect page; forwards the browser to /{short_url}.

    The target is a same-origin path so no header can point it elsewhere.
    """
    return templates.TemplateResponse(
        request,
        "redirect.html",
        {"short_url": short_url, "target_url": f"/{quote(short_url, safe='')}"},
    )


@router.get(
    "/health",
    response_model=ApiResponse[HealthData],
    response_model_exclude_none=True,
    summary="Health check",
    description="Liveness plus database connectivity.",
    tags=["health"],
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return envelope(data={
        "status": "ok",
        "timestamp": isoformat_utc(datetime.now(timezone.utc)),
        "database": "connected" if health["database"] else "disconnected",
        "uptime": round(time.monotonic() - request.app.state.started_at, 3),
    })


@router.get("/{short_url}", include_in_schema=False)
async def redirect_to_url(request: Request, short_url: str):
    """Redirect to the original URL, counting the visit.

    Unknown codes go to the not-found page so the frontend can show a
    friendly error instead of a bare 404.
    """
    service = request.app.state.service
    config = request.app.state.config

    original_url = await service.resolve(short_url)

    if not original_url:
        return RedirectResponse(url=config.not_found_url, status_code=status.HTTP_302_FOUND)

    # 302 so browsers come back through us and every visit is counted
    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)


async def resolve_unmatched_path(request: Request) -> Optional[Response]:
    """Try an unmatched GET path as a short code lookup.

    The trailing path segment is resolved when it looks like a short code.

    Returns:
        A redirect on hit, None when the path is a true 404
    """
    if request.method != "GET":
        return None

    config = request.app.state.config
    segment = request.url.path.rstrip("/").rsplit("/", 1)[-1]

    if not is_candidate_short_code(segment, config.api_prefix):
        return None

    original_url = await request.app.state.service.resolve(segment)
    if not original_url:
        return None

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
