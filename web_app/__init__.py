"""HTTP layer for the Brevly service."""

from .app_factory import create_app

__all__ = ["create_app"]
