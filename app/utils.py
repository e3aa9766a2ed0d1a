"""Utility helpers for the CineBusca service."""

from __future__ import annotations

import re
from datetime import date
from typing import Any


ISO_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{2})-(\d{2})")


def normalize_base_url(value: str | None) -> str | None:
    """Return ``value`` without surrounding whitespace or trailing slashes."""

    if not value:
        return None
    normalized = value.strip().rstrip("/")
    return normalized or None


def build_image_url(path: Any, base_url: str) -> str | None:
    """Resolve an artwork path returned by the catalog API to a full URL."""

    if not isinstance(path, str):
        return None
    path = path.strip()
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    if not base_url:
        return None
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{base_url}{path}"


def parse_release_date(value: Any) -> date | None:
    """Parse the leading ``YYYY-MM-DD`` portion of an ISO date string."""

    if not isinstance(value, str):
        return None
    match = ISO_DATE_RE.match(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None
