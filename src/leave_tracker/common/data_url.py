from __future__ import annotations

import base64
import binascii
from urllib.parse import unquote_to_bytes

from ..core.exceptions import ValidationError


def to_data_url(content: bytes, mimetype: str) -> str:
    """Inline a file as an RFC 2397 `data:` URL (base64 encoded)."""
    return f"data:{mimetype};base64,{base64.b64encode(content).decode('ascii')}"


def parse_data_url(url: str) -> tuple[bytes, str]:
    """Return (content, mimetype) for a `data:` URL."""
    if not url or not url.startswith("data:") or "," not in url:
        raise ValidationError("Stored certificate is not a valid data URL")

    header, payload = url[len("data:"):].split(",", 1)
    params = header.split(";")
    mimetype = params[0] or "text/plain"

    if "base64" in params[1:]:
        try:
            return base64.b64decode(payload, validate=True), mimetype
        except binascii.Error:
            raise ValidationError("Stored certificate is corrupted")
    return unquote_to_bytes(payload), mimetype
