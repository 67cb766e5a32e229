"""JSON API for links and reports."""

from .routes import router as api_router

__all__ = ["api_router"]
