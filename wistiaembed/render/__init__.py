"""Embed markup renderers."""

from .registry import get_renderer, register_renderer, render_embed, reset_renderer_registry

__all__ = ["get_renderer", "register_renderer", "render_embed", "reset_renderer_registry"]
