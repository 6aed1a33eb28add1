"""Google Analytics event tracking for API embeds."""

from __future__ import annotations

from typing import Any, List, Mapping

from ..params.builder import ResolvedOptions
from .common import js_identifier, js_literal


def track_event_args(analytics: Mapping[str, Any], action_key: str) -> List[str]:
    """Arguments for ``_gaq.push(['_trackEvent', ...])``.

    Trailing fields are optional in order: ``value`` needs ``label`` and
    ``nonInteraction`` needs ``value``.
    """

    args = [
        js_literal("_trackEvent"),
        js_literal(analytics.get("category", "")),
        js_literal(analytics.get(action_key, "")),
    ]
    if "label" not in analytics:
        return args
    args.append(js_literal(analytics["label"]))
    if "value" not in analytics:
        return args
    args.append(js_literal(analytics["value"]))
    if "nonInteraction" in analytics:
        args.append(js_literal(analytics["nonInteraction"]))
    return args


def render_analytics_js(hashed_id: str, options: ResolvedOptions) -> str:
    """Play and end event tracking script, or ``""`` when analytics is off."""

    analytics = options.analytics
    if not analytics:
        return ""

    ident = js_identifier(hashed_id)
    play_args = ",\n      ".join(track_event_args(analytics, "playAction"))
    end_args = ",\n      ".join(track_event_args(analytics, "endAction"))
    return (
        f"function ga_{ident}() {{\n"
        "  _gaq.push([\n"
        f"      {play_args}\n"
        "  ]);\n"
        f"  wistiaEmbed_{ident}.unbind('play', ga_{ident});\n"
        "}\n"
        f"wistiaEmbed_{ident}.bind('play', ga_{ident});\n"
        f"wistiaEmbed_{ident}.bind('end', function () {{\n"
        "  _gaq.push([\n"
        f"      {end_args}\n"
        "  ]);\n"
        "});"
    )
