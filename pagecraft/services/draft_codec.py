"""
Draft link codec.

Packs a pending-edit overlay into a URL-safe token so unsaved edits can be
previewed through a plain link, without a live channel:

    token = base64url(compact_json(overlay)) with padding stripped

Decoding fails closed: any malformed, truncated, mis-shaped or too deeply
nested token raises ``DraftDecodeError`` and never yields a partial overlay.
"""

import base64
import binascii
import json
import logging
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote, urlencode

from pagecraft.services.overlay import Overlay

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]+$")
_ID_RE = re.compile(r"^-?\d+$")


class DraftDecodeError(ValueError):
    """Raised when a draft token cannot be turned back into an overlay."""


def encode(overlay: Mapping[int, Mapping[str, Any]]) -> str:
    """
    Encode an overlay as an opaque URL-safe token.

    Args:
        overlay: Pending edits keyed by integer component id

    Returns:
        Token made only of ``A-Z a-z 0-9 - _``

    Raises:
        TypeError: If a patch value is not JSON-serializable
    """
    payload = {str(int(cid)): dict(fields) for cid, fields in overlay.items()}
    raw = json.dumps(payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode(token: str) -> Overlay:
    """
    Decode a token produced by :func:`encode`.

    Raises:
        DraftDecodeError: If the token is malformed, truncated or does not
            describe an overlay
    """
    if not isinstance(token, str) or not _TOKEN_RE.match(token):
        raise DraftDecodeError("Draft token contains invalid characters")

    padded = token + "=" * (-len(token) % 4)
    try:
        raw = base64.urlsafe_b64decode(padded.encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DraftDecodeError(f"Draft token is not decodable: {e}") from e

    if not isinstance(payload, dict):
        raise DraftDecodeError("Draft token does not contain an object")

    overlay: Overlay = {}
    for key, fields in payload.items():
        if not _ID_RE.match(key):
            raise DraftDecodeError(f"Invalid component id in draft token: {key!r}")
        if not isinstance(fields, dict):
            raise DraftDecodeError(f"Draft entry for component {key} is not an object")
        overlay[int(key)] = fields
    return overlay


def decode_or_empty(token: str | None) -> Overlay:
    """Decode a token, treating a missing or bad token as "no overrides"."""
    if not token:
        return {}
    try:
        return decode(token)
    except DraftDecodeError as e:
        logger.warning(f"Ignoring draft token: {e}")
        return {}


def draft_url(base_url: str, page_key: str, overlay: Mapping[int, Mapping[str, Any]]) -> str:
    """Build the shareable preview link for a page with pending edits."""
    url = f"{base_url.rstrip('/')}/preview/{quote(page_key, safe='')}"
    if not overlay:
        return url
    return f"{url}?{urlencode({'draft': encode(overlay)})}"
