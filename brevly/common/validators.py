"""Validation utilities for the URL shortener."""

import re
from urllib.parse import urlparse
from typing import Tuple

from ..errors import ValidationError


MAX_URL_LENGTH = 2048
SHORT_CODE_MIN_LENGTH = 3
SHORT_CODE_MAX_LENGTH = 20
CANDIDATE_MAX_LENGTH = 64

HTTP_SCHEME_PATTERN = re.compile(r'^(https?)://', re.IGNORECASE)
SHORT_CODE_PATTERN = re.compile(r'^[a-zA-Z0-9-]+$')
CANDIDATE_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

# Values that would shadow a functional route
RESERVED_WORDS = frozenset({
    "admin", "api", "auth", "login", "logout", "register",
    "dashboard", "settings", "profile", "help", "about",
    "contact", "terms", "privacy", "health", "status",
})

SUSPICIOUS_PATTERNS = [
    re.compile(r'javascript:', re.IGNORECASE),
    re.compile(r'data:', re.IGNORECASE),
    re.compile(r'vbscript:', re.IGNORECASE),
    re.compile(r'file:', re.IGNORECASE),
    re.compile(r'ftp:', re.IGNORECASE),
]


def sanitize_url(url: str) -> str:
    """Normalize a user supplied URL.

    Trims it, removes any embedded whitespace and prepends ``https://``
    when no http(s) scheme is present.

    Args:
        url: Raw URL

    Returns:
        Normalized URL
    """
    sanitized = re.sub(r'\s+', '', url.strip())

    match = HTTP_SCHEME_PATTERN.match(sanitized)
    if match:
        # Schemes are case-insensitive; store them lowercased
        sanitized = match.group(1).lower() + sanitized[len(match.group(1)):]
    else:
        sanitized = 'https://' + sanitized

    return sanitized


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(pattern.search(url) for pattern in SUSPICIOUS_PATTERNS):
        return False, "URL contains a disallowed protocol"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if netloc (domain) exists
        if not result.netloc or not result.hostname:
            return False, "URL must have a valid domain"

        # Raises ValueError for a non-numeric or out of range port
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def validate_url(url: str) -> str:
    """Validate and normalize a URL.

    Args:
        url: Raw URL from the client

    Returns:
        Normalized URL

    Raises:
        ValidationError: With the message of the first violated rule
    """
    if not url or not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")

    normalized = sanitize_url(url)
    is_valid, error = is_valid_url(normalized)
    if not is_valid:
        raise ValidationError(error)

    return normalized


def is_valid_short_code(
    short_code: str,
    min_length: int = SHORT_CODE_MIN_LENGTH,
    max_length: int = SHORT_CODE_MAX_LENGTH,
) -> Tuple[bool, str]:
    """Validate a short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    # Only allow alphanumeric characters and hyphens
    if not SHORT_CODE_PATTERN.match(short_code):
        return False, "Short code can only contain letters, numbers, and hyphens"

    if short_code.lower() in RESERVED_WORDS:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""


def validate_short_code(short_code: str) -> str:
    """Validate a short code, raising on the first violated rule."""
    is_valid, error = is_valid_short_code(short_code)
    if not is_valid:
        raise ValidationError(error)
    return short_code


def is_candidate_short_code(segment: str, api_prefix: str = "/api") -> bool:
    """Check whether an unmatched path segment may be tried as a short code.

    Looser than is_valid_short_code: underscores are accepted and the
    length limit is larger, so codes created by older clients still resolve.

    Args:
        segment: Trailing path segment
        api_prefix: API path prefix, never treated as a code

    Returns:
        True if the segment should be looked up
    """
    if not segment or len(segment) > CANDIDATE_MAX_LENGTH:
        return False

    if segment == api_prefix.strip("/"):
        return False

    return bool(CANDIDATE_PATTERN.match(segment))
