"""Iframe embed: every option travels in the iframe URL query string."""

from __future__ import annotations

import html
from typing import Any, List, Optional, Sequence, Tuple
from urllib.parse import quote, urlencode

from ..params.builder import ResolvedOptions
from .common import query_value, scheme_for

IFRAME_PATH = "://fast.wistia.net/embed/iframe/"
EMBED_VERSION = "v1"
SOCIALBAR_PLUGIN_KEY = "plugin[socialbar-v1][{}]"

SOCIALBAR_HEIGHT = 28
SOCIALBAR_SECOND_ROW_HEIGHT = 34
SOCIALBAR_BUTTONS_PER_ROW = 5


def build_iframe_query(options: ResolvedOptions) -> List[Tuple[str, str]]:
    query = [(key, query_value(value)) for key, value in options.general.items()]
    query.append(("version", EMBED_VERSION))

    socialbar = options.socialbar
    if socialbar:
        for key, value in socialbar.items():
            query.append((SOCIALBAR_PLUGIN_KEY.format(key), query_value(value)))
    return query


def iframe_url(
    hashed_id: str,
    options: ResolvedOptions,
    extra: Optional[Sequence[Tuple[str, str]]] = None,
) -> str:
    """Unescaped iframe URL; spaces are encoded as ``%20``."""

    query = build_iframe_query(options)
    if extra:
        query.extend(extra)
    encoded = urlencode(query, quote_via=quote)
    return f"{scheme_for(options.general.get('ssl'))}{IFRAME_PATH}{quote(hashed_id)}?{encoded}"


def iframe_height(options: ResolvedOptions) -> int:
    """Player height plus room for the social bar (one or two rows)."""

    height = int(options.general.get("videoHeight") or 0)
    socialbar = options.socialbar
    if socialbar:
        height += SOCIALBAR_HEIGHT
        if len(socialbar.get("buttons", ())) > SOCIALBAR_BUTTONS_PER_ROW:
            height += SOCIALBAR_SECOND_ROW_HEIGHT
    return height


def render_iframe(video: Any, options: ResolvedOptions) -> str:
    src = html.escape(iframe_url(video.hashed_id, options), quote=True)
    width = options.general.get("videoWidth", "")
    return (
        f'<iframe src="{src}"\n'
        '    allowtransparency="true"\n'
        '    frameborder="0"\n'
        '    scrolling="no"\n'
        '    class="wistia_embed"\n'
        '    name="wistia_embed"\n'
        f'    width="{width}"\n'
        f'    height="{iframe_height(options)}"></iframe>'
    )
