"""Browser pages, health and short link redirects."""

from .routes import router as web_router, resolve_unmatched_path

__all__ = ["web_router", "resolve_unmatched_path"]
