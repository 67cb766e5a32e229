"""Common utilities for the Brevly service."""

from .validators import (
    is_valid_url,
    is_valid_short_code,
    is_candidate_short_code,
    sanitize_url,
    validate_url,
    validate_short_code,
)
from .url_builder import build_base_url, build_short_url
from .logging_config import setup_logging

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_candidate_short_code",
    "sanitize_url",
    "validate_url",
    "validate_short_code",
    "build_base_url",
    "build_short_url",
    "setup_logging",
]
