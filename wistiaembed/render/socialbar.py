"""Social bar plugin script for JS API embeds."""

from __future__ import annotations

from typing import List

from ..params.builder import ResolvedOptions
from .common import js_identifier, js_literal

# passed through under their own names, in output order
_OPTIONAL_KEYS = ("badgeImage", "pageUrl", "tweetText", "showTweetCount", "downloadType")


def render_socialbar_js(hashed_id: str, options: ResolvedOptions) -> str:
    """Script attaching the social bar plugin to an API embed, or ``""``."""

    socialbar = options.socialbar
    if not socialbar:
        return ""

    ident = js_identifier(hashed_id)
    fields: List[str] = [
        'version: "v1"',
        f"buttons: {js_literal(socialbar['buttons'])}",
    ]
    if socialbar.get("badgeUrl"):
        fields.append("logo: true")
        fields.append(f"badgeUrl: {js_literal(socialbar['badgeUrl'])}")
    for key in _OPTIONAL_KEYS:
        if key in socialbar:
            fields.append(f"{key}: {js_literal(socialbar[key])}")

    body = ",\n  ".join(fields)
    return f"Wistia.plugin.socialbar(wistiaEmbed_{ident}, {{\n  {body}\n}});"
