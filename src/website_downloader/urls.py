"""
URL validation and naming helpers.
"""
from __future__ import annotations

import hashlib
import re
from urllib.parse import urlparse

# Optional scheme, dotted host, optional port, optional whitespace-free path
URL_PATTERN = re.compile(
    r"^(https?://)?([\w-]+\.)+[\w-]+(:\d+)?(/[^\s]*)?$",
    re.IGNORECASE | re.ASCII,
)

DEFAULT_DOMAIN = "default"
HOMEPAGE_FILENAME = "index.html"


def is_valid_url(url: object) -> bool:
    """Syntactic URL check. No DNS or network lookup is done."""
    if not isinstance(url, str):
        return False
    return URL_PATTERN.fullmatch(url) is not None


def normalize_seed_url(url: str) -> str:
    """Prefix http:// when a validated seed URL has no scheme."""
    url = url.strip()
    if re.match(r"^https?://", url, re.IGNORECASE):
        return url
    return f"http://{url}"


def extract_domain_name(url: str) -> str:
    """
    Return the URL host without a single leading "www.".

    Falls back to "default" when the URL cannot be parsed or has no host.
    """
    try:
        hostname = urlparse(url).hostname
    except (ValueError, TypeError, AttributeError):
        return DEFAULT_DOMAIN

    if not hostname:
        return DEFAULT_DOMAIN
    return hostname.removeprefix("www.") or DEFAULT_DOMAIN


def link_filename(url: str) -> str:
    """Deterministic local file name for a link (different URLs may collide)."""
    digest = hashlib.sha256(url.encode("utf-8")).hexdigest()
    return f"{digest[:16]}.html"
