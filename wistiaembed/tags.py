"""Template tag entry points: embed markup and single-field modifiers."""

from __future__ import annotations

import html
import re
from typing import Any, Mapping, Optional

from .api.client import SECTION_PREFIX, WistiaClient
from .api.models import VideoRecord
from .exceptions import ApiError
from .params.builder import build_options
from .params.resolver import Overrides, lookup_keys
from .params.sanitizers import sanitize_bool, sanitize_int
from .params.schema import GENERAL_GROUP, Schema, default_schema
from .params.types import ServerContext
from .render.common import resized_thumbnail_url
from .render.registry import render_embed
from .utils.logger import log_exception, logger

API_ACCESS_ERROR = "Error fetching API data."

MODIFIERS = (
    "created",
    "description",
    "duration",
    "hashed_id",
    "id",
    "name",
    "progress",
    "section",
    "type",
    "updated",
)

DEFAULT_ASSET_FORMAT = "mp4"
_FORMAT_RE = re.compile(r"[a-z0-9]+")
_TAG_RE = re.compile(r"<[^>]*>")


def strip_tags(value: str) -> str:
    """Drop HTML tags, then escape without double-encoding existing entities."""

    text = _TAG_RE.sub("", value)
    return html.escape(html.unescape(text), quote=True).strip()


class EmbedTags:
    """Renders the ``{wistia}`` tag family for one request."""

    def __init__(
        self,
        client: WistiaClient,
        server: Optional[ServerContext] = None,
        schema: Optional[Schema] = None,
    ):
        self.client = client
        self.server = server or ServerContext()
        self.schema = schema or default_schema()

    def _fetch(self, video_id: Any) -> Optional[VideoRecord]:
        try:
            return self.client.get_video(video_id)
        except ApiError as e:
            log_exception(e)
            return None

    def embed(self, video_id: Any, params: Optional[Mapping[str, Any]] = None) -> str:
        """Embed markup for ``video_id``, or an error message when the API fails."""

        video = self._fetch(video_id)
        if video is None:
            return API_ACCESS_ERROR
        options = build_options(params, video, self.server, self.schema)
        return render_embed(video, options)

    def modifier(
        self, video_id: Any, name: str, params: Optional[Mapping[str, Any]] = None
    ) -> Optional[str]:
        """One field of the video record, e.g. ``{wistia:description striptags="yes"}``."""

        if name not in MODIFIERS:
            raise ValueError(f"Unknown modifier: {name}")

        video = self._fetch(video_id)
        if video is None:
            return None

        raw = getattr(video, name)
        value = "" if raw is None else str(raw)
        overrides = Overrides(params)
        if "striptags" in overrides and sanitize_bool(overrides["striptags"], False):
            value = strip_tags(value)
        return value

    def thumbnail(self, video_id: Any, params: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """Thumbnail URL, crop-resized when both width and height are given."""

        video = self._fetch(video_id)
        if video is None:
            return None

        overrides = Overrides(params)
        width = self._explicit_int(overrides, "videoWidth")
        height = self._explicit_int(overrides, "videoHeight")
        if width is not None and height is not None:
            return resized_thumbnail_url(video.thumbnail_url, width, height)
        return video.thumbnail_url

    def asset_url(self, video_id: Any, params: Optional[Mapping[str, Any]] = None) -> Optional[str]:
        """URL of the first asset, renamed to the requested file format."""

        video = self._fetch(video_id)
        if video is None:
            return None
        if not video.assets:
            logger.warning("[Tags] Video %s has no assets", video.hashed_id)
            return None

        overrides = Overrides(params)
        fmt = str(overrides.get("format", DEFAULT_ASSET_FORMAT)).strip().lower()
        if not _FORMAT_RE.fullmatch(fmt):
            fmt = DEFAULT_ASSET_FORMAT
        return video.assets[0].url.replace(".bin", f"/file.{fmt}")

    @staticmethod
    def save(value: Optional[str]) -> str:
        """Value to store for a picker choice; section headers store nothing."""

        if not value or value.startswith(SECTION_PREFIX):
            return ""
        return value

    def _explicit_int(self, overrides: Overrides, option: str) -> Optional[int]:
        general = self.schema.group(GENERAL_GROUP)
        spec = general.get(option) if general else None
        keys = lookup_keys(option, spec) if spec else (option.lower(),)
        for key in keys:
            if key in overrides:
                return sanitize_int(overrides[key], None)
        return None
