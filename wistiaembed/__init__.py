"""Wistia embed option resolution and markup rendering."""

from .api import VideoRecord, WistiaClient
from .params import Overrides, ResolvedOptions, ServerContext, build_options, default_schema
from .render import render_embed
from .tags import EmbedTags

__version__ = "0.3.0"

__all__ = [
    "EmbedTags",
    "Overrides",
    "ResolvedOptions",
    "ServerContext",
    "VideoRecord",
    "WistiaClient",
    "build_options",
    "default_schema",
    "render_embed",
]
