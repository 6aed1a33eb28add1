"""Serialization helpers shared by the embed renderers.

Resolved options hold real ``bool``/``int``/``tuple`` values; they are turned
into strings only here, at the markup boundary.
"""

from __future__ import annotations

import json
import re
from typing import Any

BUTTON_SEPARATOR = "-"
_NON_IDENT_RE = re.compile(r"\W")


def query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (tuple, list)):
        return BUTTON_SEPARATOR.join(str(v) for v in value)
    return str(value)


def js_literal(value: Any) -> str:
    """Render ``value`` as a JavaScript literal; strings are quoted and escaped."""

    if isinstance(value, (tuple, list)):
        value = BUTTON_SEPARATOR.join(str(v) for v in value)
    text = json.dumps(value, ensure_ascii=False)
    # keep "</script>" and friends out of inline scripts
    return text.replace("<", "\\u003c").replace(">", "\\u003e").replace("&", "\\u0026")


def js_identifier(hashed_id: str) -> str:
    """A hashed id usable as part of a JavaScript identifier."""

    return _NON_IDENT_RE.sub("_", str(hashed_id))


def scheme_for(ssl: Any) -> str:
    return "https" if ssl is True else "http"


def resized_thumbnail_url(url: str, width: Any, height: Any) -> str:
    """Replace the query of a thumbnail URL with a crop-resize request."""

    if not url:
        return url
    base = url.split("?", 1)[0]
    return f"{base}?image_crop_resized={width}x{height}"
