"""JS API embed: a container div plus a script that builds the player."""

from __future__ import annotations

import html
from typing import Any

from ..params.builder import ResolvedOptions
from .analytics import render_analytics_js
from .common import js_identifier, js_literal, scheme_for
from .socialbar import render_socialbar_js

LOADER_SCRIPT_PATH = (
    "://fast.wistia.com/static/concat/E-v1%2Csocialbar-v1%2CpostRoll-v1%2CrequireEmail-v1.js"
)
POLL_INTERVAL_MS = 100
# general options that select the renderer rather than configure the player
_RENDER_ONLY_OPTIONS = frozenset({"type"})


def embed_options_js(options: ResolvedOptions) -> str:
    fields = ['version: "v1"']
    for key, value in options.general.items():
        if key in _RENDER_ONLY_OPTIONS:
            continue
        fields.append(f"{key}: {js_literal(value)}")
    return ",\n      ".join(fields)


def _indent(snippet: str, prefix: str = "    ") -> str:
    return "\n".join(prefix + line if line else line for line in snippet.splitlines())


def render_api(video: Any, options: ResolvedOptions) -> str:
    hashed_id = video.hashed_id
    ident = js_identifier(hashed_id)
    general = options.general
    width = general.get("videoWidth", "")
    height = general.get("videoHeight", "")
    loader_url = scheme_for(general.get("ssl")) + LOADER_SCRIPT_PATH

    extras = "\n".join(
        _indent(snippet)
        for snippet in (
            render_socialbar_js(hashed_id, options),
            render_analytics_js(hashed_id, options),
        )
        if snippet
    )

    return (
        f'<div id="wistia_{html.escape(hashed_id, quote=True)}"\n'
        '    class="wistia_embed"\n'
        f'    style="width:{width}px;height:{height}px;"\n'
        f'    data-video-width="{width}"\n'
        f'    data-video-height="{height}">&nbsp;\n'
        "</div>\n"
        "<script>\n"
        "  if (typeof wistiaScript === 'undefined') {\n"
        "    var wistiaScript = document.createElement('script');\n"
        f"    wistiaScript.src = {js_literal(loader_url)};\n"
        "    document.getElementsByTagName('head')[0].appendChild(wistiaScript);\n"
        "  }\n"
        "\n"
        f"  function wistiaInit_{ident}() {{\n"
        "    if (typeof Wistia === 'undefined') {\n"
        f"      setTimeout(wistiaInit_{ident}, {POLL_INTERVAL_MS});\n"
        "      return;\n"
        "    }\n"
        "\n"
        f"    wistiaEmbed_{ident} = Wistia.embed({js_literal(hashed_id)}, {{\n"
        f"      {embed_options_js(options)}\n"
        "    });\n"
        f"{extras}\n"
        "  }\n"
        "\n"
        f"  wistiaInit_{ident}();\n"
        "</script>"
    )
