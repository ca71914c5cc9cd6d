"""
Helpers for turning a created head into a playable stream link.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode, urlparse

from .config import settings


API_KEY_RE = re.compile(r"(api_key=)[^&\s]+", re.IGNORECASE)


def extract_head_id(created: Any) -> str:
    """Head identifier from a ``/head/create`` response, or ``""``."""
    if not isinstance(created, dict):
        return ""
    for key in ("id", "publicId", "headId"):
        if created.get(key):
            return str(created[key])
    return ""


def extract_public_url(details: Any, created: Any = None) -> str:
    """``publicUrl`` from the head details, falling back to the create response."""
    for payload in (details, created):
        if isinstance(payload, dict) and payload.get("publicUrl"):
            return str(payload["publicUrl"])
    return ""


def build_stream_url(public_url: str, stream_base_url: Optional[str] = None) -> Optional[str]:
    """
    Rewrite a head's public URL into a streaming URL.

    The public URL looks like ``https://<host>/<orgId>/<headId>?api_key=<key>``.
    The stream URL keeps org, head and key but points at the stream host.

    Args:
        public_url: ``publicUrl`` reported by the platform
        stream_base_url: Override for the configured stream host

    Returns:
        The stream URL, or None when org, head or api key is missing
    """
    if not public_url:
        return None
    try:
        parsed = urlparse(public_url)
    except ValueError:
        return None
    if not parsed.scheme or not parsed.netloc:
        return None

    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        return None
    org, head = parts[0], parts[1]

    api_key = (parse_qs(parsed.query).get("api_key") or [""])[0]
    if not api_key:
        return None

    base = (stream_base_url or settings.UNITH_STREAM_BASE_URL).rstrip("/")
    return f"{base}/{org}/{head}?{urlencode({'api_key': api_key})}"


def redact_stream_url(url: Optional[str]) -> str:
    """Mask the org api key so a stream URL can be logged."""
    if not url:
        return ""
    return API_KEY_RE.sub(r"\1***", url)


def summarize_head(created: Dict[str, Any]) -> Dict[str, Any]:
    """Small, log-safe view of a create response."""
    return {
        "head_id": extract_head_id(created),
        "alias": created.get("alias"),
        "has_public_url": bool(created.get("publicUrl")),
    }
