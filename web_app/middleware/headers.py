"""Security headers middleware."""

import logging
import re
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Content-Security-Policy": (
        "default-src 'self'; script-src 'self' 'unsafe-inline'; style-src 'self' 'unsafe-inline'"
    ),
}

SUSPICIOUS_URL_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"<script", r"javascript:", r"data:text/html", r"vbscript:",
        r"onload=", r"onerror=", r"onclick=",
        r"union.*select", r"drop.*table", r"insert.*into",
        r"delete.*from", r"update.*set", r"exec.*sp_", r"xp_cmdshell",
    )
]

SUSPICIOUS_USER_AGENTS = ("sqlmap", "nikto", "nmap", "w3af", "burp", "zap")


def is_suspicious_request(url: str, user_agent: str) -> bool:
    """Check a request URL and user agent for common attack signatures."""
    if any(pattern.search(url) for pattern in SUSPICIOUS_URL_PATTERNS):
        return True
    user_agent = user_agent.lower()
    return any(agent in user_agent for agent in SUSPICIOUS_USER_AGENTS)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds browser hardening headers and flags suspicious requests."""

    def __init__(self, app, logger: logging.Logger = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("brevly.security")

    async def dispatch(self, request: Request, call_next: Callable):
        user_agent = request.headers.get("user-agent", "")
        if is_suspicious_request(str(request.url), user_agent):
            client_ip = request.client.host if request.client else "unknown"
            self.logger.warning(
                f"Suspicious request: {request.method} {request.url} "
                f"from {client_ip} (user-agent: {user_agent!r})"
            )

        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
