"""Core business logic for the Brevly URL shortener."""

from .shortcode import ShortCodeGenerator
from .service import LinkService
from .reports import ReportGenerator

__all__ = ["ShortCodeGenerator", "LinkService", "ReportGenerator"]
