"""Registry mapping embed types to renderer callables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence

from wistiaembed.utils.logger import logger

from ..params.builder import ResolvedOptions

EmbedRenderer = Callable[[Any, ResolvedOptions], str]

DEFAULT_EMBED_TYPE = "iframe"
SOURCE_PRIORITY = {"user": 3, "package": 2, "builtin": 1}


@dataclass(frozen=True)
class RendererSpec:
    """Renderer registration entry."""

    name: str
    renderer: EmbedRenderer
    source: str
    aliases: tuple[str, ...]


_RENDERER_REGISTRY: Dict[str, RendererSpec] = {}
_BUILTINS_LOADED = False


def register_renderer(
    name: str,
    renderer: EmbedRenderer,
    *,
    aliases: Sequence[str] | None = None,
    source: str = "user",
) -> None:
    """Register a renderer under an embed type and optional aliases.

    An existing entry from a higher priority source is not replaced.
    """

    spec = RendererSpec(name=name, renderer=renderer, source=source, aliases=tuple(aliases or ()))
    for key in (name, *spec.aliases):
        key = key.strip().lower()
        existing = _RENDERER_REGISTRY.get(key)
        if existing and _source_priority(existing.source) > _source_priority(source):
            continue
        _RENDERER_REGISTRY[key] = spec


def get_renderer(embed_type: Optional[str]) -> RendererSpec:
    """Renderer for ``embed_type``; unknown types use the iframe renderer."""

    _ensure_registry_populated()
    key = (embed_type or DEFAULT_EMBED_TYPE).strip().lower()
    spec = _RENDERER_REGISTRY.get(key)
    if spec is None:
        logger.warning("[Render] Unsupported embed type: %s; using %s", embed_type, DEFAULT_EMBED_TYPE)
        spec = _RENDERER_REGISTRY[DEFAULT_EMBED_TYPE]
    return spec


def render_embed(video: Any, options: ResolvedOptions) -> str:
    """Render ``video`` with the renderer selected by ``general.type``."""

    spec = get_renderer(options.embed_type)
    logger.kv_debug(
        "[Render] Rendering embed",
        kv_pairs={"Video": getattr(video, "hashed_id", None), "Type": spec.name},
    )
    return spec.renderer(video, options)


def reset_renderer_registry() -> None:
    """Clear registry (for tests)."""

    global _BUILTINS_LOADED
    _RENDERER_REGISTRY.clear()
    _BUILTINS_LOADED = False


def _ensure_registry_populated() -> None:
    global _BUILTINS_LOADED
    if _BUILTINS_LOADED:
        return
    _BUILTINS_LOADED = True
    from .api import render_api
    from .iframe import render_iframe
    from .popover import render_popover

    register_renderer("iframe", render_iframe, source="builtin")
    register_renderer("api", render_api, source="builtin")
    register_renderer("popover", render_popover, source="builtin")


def _source_priority(source: str) -> int:
    return SOURCE_PRIORITY.get(source, 0)


__all__ = [
    "RendererSpec",
    "get_renderer",
    "register_renderer",
    "render_embed",
    "reset_renderer_registry",
]
