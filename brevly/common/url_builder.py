"""URL building utilities for short links."""

from typing import Mapping, Optional


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
    trust_forwarded: bool = False,
) -> str:
    """Build the public base URL a short link is rendered with.

    Priority:
    1. X-Forwarded-Proto + X-Forwarded-Host, only when trust_forwarded is set
    2. Request scheme + host
    3. Configured base URL

    Args:
        headers: Request headers
        fallback_base_url: Base URL from configuration
        request_scheme: Request scheme (http/https)
        request_host: Request Host header
        trust_forwarded: Whether a trusted reverse proxy sets X-Forwarded-*

    Returns:
        Base URL without trailing slash (e.g., https://brev.ly)
    """
    if trust_forwarded:
        headers_lower = {k.lower(): v for k, v in headers.items()}
        proto = headers_lower.get("x-forwarded-proto")
        host = headers_lower.get("x-forwarded-host")

        if proto and host:
            return f"{proto}://{host}"

    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"

    return fallback_base_url.rstrip("/")


def build_short_url(short_code: str, base_url: str) -> str:
    """Build the complete short link for a code.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://brev.ly)

    Returns:
        Complete short link
    """
    return f"{base_url.rstrip('/')}/{short_code}"
