"""Popover embed: a thumbnail link that opens the player in a lightbox."""

from __future__ import annotations

import html
from typing import Any

from ..params.builder import ResolvedOptions
from .common import resized_thumbnail_url, scheme_for
from .iframe import iframe_url

POPOVER_SCRIPT_PATH = "://fast.wistia.com/assets/external/popover-v1.js"


def render_popover(video: Any, options: ResolvedOptions) -> str:
    general = options.general
    width = general.get("videoWidth", "")
    height = general.get("videoHeight", "")
    scheme = scheme_for(general.get("ssl"))

    href = html.escape(iframe_url(video.hashed_id, options, [("popover", "true")]), quote=True)
    settings = [f"height={height}", f"width={width}"]
    if general.get("playerColor"):
        settings.insert(1, f"playerColor={general['playerColor']}")
    css_class = f"wistia-popover[{','.join(settings)}]"

    thumbnail = resized_thumbnail_url(getattr(video, "thumbnail_url", ""), width, height)
    if thumbnail:
        label = (
            f'<img src="{html.escape(thumbnail, quote=True)}"'
            f' alt="{html.escape(video.name, quote=True)}" />'
        )
    else:
        label = html.escape(video.name)

    return (
        f'<a href="{href}" class="{css_class}">{label}</a>\n'
        f'<script charset="ISO-8859-1" src="{scheme}{POPOVER_SCRIPT_PATH}"></script>'
    )
