"""
Request hardening helpers used by the HTTP middleware.

- Referer/Origin allow-list check
- Response security headers
- Input sanitizing (trim, strip <script> blocks)
"""

from __future__ import annotations

import re
from typing import Any

SCRIPT_TAG = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)

SECURITY_HEADERS: dict[str, str] = {
    "Content-Security-Policy": (
        "default-src 'self'; style-src 'self' 'unsafe-inline'; "
        "script-src 'self'; img-src 'self' data: https:"
    ),
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "cross-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Frame-Options": "SAMEORIGIN",
}


def strip_host_scheme(url: str) -> str:
    return re.sub(r"^https?://", "", url).rstrip("/")


def referer_allowed(
    referer: str | None,
    allowed_domains: list[str],
    *,
    environment: str,
) -> bool:
    """
    Whether a request with this Referer (or Origin) may reach the API.

    Always allowed in development, without a referer (curl, server-to-server),
    or when no domains are configured.
    """
    if environment == "development":
        return True
    if not referer:
        return True
    domains = [strip_host_scheme(d) for d in allowed_domains if d]
    if not domains:
        return True
    return any(domain in referer for domain in domains)


def sanitize_text(value: str) -> str:
    return SCRIPT_TAG.sub("", value.strip())


def sanitize_value(value: Any) -> Any:
    """Recursively sanitize every string in a decoded JSON value."""
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        return [sanitize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_value(v) for k, v in value.items()}
    return value
