from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple

from ..exceptions import ApiError

ERROR_INCOMPLETE_RECORD = 6


@dataclass(frozen=True)
class Asset:
    url: str
    type: str = ""
    content_type: str = ""
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class VideoRecord:
    """A media entry as returned by the Wistia data API."""

    id: str
    hashed_id: str
    name: str
    thumbnail_url: str = ""
    assets: Tuple[Asset, ...] = ()
    description: str = ""
    duration: Optional[float] = None
    created: str = ""
    updated: str = ""
    progress: Optional[float] = None
    section: str = ""
    type: str = ""
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_api(cls, data: Any) -> "VideoRecord":
        """Build a record from a decoded ``medias/<id>.json`` payload."""

        if not isinstance(data, dict):
            raise ApiError("Malformed video record: expected an object", ERROR_INCOMPLETE_RECORD)
        missing = [key for key in ("id", "hashed_id", "name") if data.get(key) in (None, "")]
        if missing:
            raise ApiError(
                f"Incomplete video record, missing {', '.join(missing)}",
                ERROR_INCOMPLETE_RECORD,
            )

        thumbnail = data.get("thumbnail")
        thumbnail_url = thumbnail.get("url", "") if isinstance(thumbnail, dict) else ""

        assets = []
        for entry in data.get("assets") or []:
            if not isinstance(entry, dict) or not entry.get("url"):
                continue
            assets.append(
                Asset(
                    url=str(entry["url"]),
                    type=str(entry.get("type") or ""),
                    content_type=str(entry.get("contentType") or ""),
                    width=entry.get("width"),
                    height=entry.get("height"),
                )
            )

        return cls(
            id=str(data["id"]),
            hashed_id=str(data["hashed_id"]),
            name=str(data["name"]),
            thumbnail_url=str(thumbnail_url or ""),
            assets=tuple(assets),
            description=str(data.get("description") or ""),
            duration=data.get("duration"),
            created=str(data.get("created") or ""),
            updated=str(data.get("updated") or ""),
            progress=data.get("progress"),
            section=str(data.get("section") or ""),
            type=str(data.get("type") or ""),
            raw=MappingProxyType(dict(data)),
        )

    @classmethod
    def stub(cls, hashed_id: str, name: str = "") -> "VideoRecord":
        """A minimal record for rendering without API access."""

        return cls(id=hashed_id, hashed_id=hashed_id, name=name or hashed_id)
