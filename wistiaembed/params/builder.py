"""Build the resolved embed options for one render call."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional

from wistiaembed.utils.logger import logger

from .resolver import Overrides, resolve_param
from .schema import (
    ANALYTICS_GROUP,
    GENERAL_GROUP,
    SOCIALBAR_GROUP,
    ParameterGroup,
    Schema,
    default_schema,
)
from .sanitizers import sanitize_bool
from .types import ServerContext

SOCIALBAR_TRIGGER_OPTION = "buttons"
ANALYTICS_LABEL_OPTION = "label"
EMBED_TYPE_OPTION = "type"
ANALYTICS_EMBED_TYPE = "api"


class ResolvedOptions(Mapping[str, Mapping[str, Any]]):
    """Immutable mapping of group name to resolved option values."""

    __slots__ = ("_groups",)

    def __init__(self, groups: Mapping[str, Mapping[str, Any]]):
        self._groups = MappingProxyType(
            {name: MappingProxyType(dict(values)) for name, values in groups.items()}
        )

    def __getitem__(self, group: str) -> Mapping[str, Any]:
        return self._groups[group]

    def __iter__(self) -> Iterator[str]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def __repr__(self) -> str:
        return f"ResolvedOptions({self.as_dict()!r})"

    @property
    def general(self) -> Mapping[str, Any]:
        return self._groups.get(GENERAL_GROUP, MappingProxyType({}))

    @property
    def socialbar(self) -> Optional[Mapping[str, Any]]:
        return self._groups.get(SOCIALBAR_GROUP)

    @property
    def analytics(self) -> Optional[Mapping[str, Any]]:
        return self._groups.get(ANALYTICS_GROUP)

    @property
    def embed_type(self) -> Any:
        return self.general.get(EMBED_TYPE_OPTION)

    def as_dict(self) -> Dict[str, Dict[str, Any]]:
        """Plain nested dict copy; tuples become lists (JSON friendly)."""

        return {
            name: {
                key: list(value) if isinstance(value, tuple) else value
                for key, value in values.items()
            }
            for name, values in self._groups.items()
        }


def is_kept_value(value: Any) -> bool:
    """Whether a resolved value is kept in its group.

    Booleans and numbers are always kept; strings and sequences only when non-empty.
    """

    if value is None:
        return False
    if isinstance(value, (bool, int, float)):
        return True
    if isinstance(value, (str, tuple, list)):
        return len(value) > 0
    return True


def option_lookup_key(group_name: str, option_name: str) -> str:
    """Override key that feeds ``group_name.option_name``."""

    if group_name == SOCIALBAR_GROUP and option_name == SOCIALBAR_TRIGGER_OPTION:
        return SOCIALBAR_GROUP
    if group_name == GENERAL_GROUP:
        return option_name
    return f"{group_name}:{option_name}"


def _resolve_embed_type(schema: Schema, overrides: Overrides, server: Optional[ServerContext]) -> Any:
    general = schema.group(GENERAL_GROUP)
    spec = general.get(EMBED_TYPE_OPTION) if general else None
    if spec is None:
        return None
    return resolve_param(EMBED_TYPE_OPTION, overrides, spec, server)


def _group_included(group: ParameterGroup, overrides: Overrides, embed_type: Any) -> bool:
    if group.name == GENERAL_GROUP:
        return True
    if group.name == ANALYTICS_GROUP:
        if ANALYTICS_GROUP not in overrides:
            return False
        enabled = sanitize_bool(overrides[ANALYTICS_GROUP], False)
        return enabled is True and embed_type == ANALYTICS_EMBED_TYPE
    return overrides.has_namespace(group.name)


def build_options(
    overrides: Optional[Mapping[str, Any]],
    video: Any,
    server: Optional[ServerContext] = None,
    schema: Optional[Schema] = None,
) -> ResolvedOptions:
    """Resolve every schema option against ``overrides``.

    Args:
        overrides: Template parameters; keys are matched case-insensitively.
        video: The video record. Only read when the analytics label falls back
            to the video name, so errors from a missing record surface to the caller.
        server: The current request. A secure request forces ``general.ssl``.
        schema: Parameter schema, the bundled one when omitted.

    Returns:
        ResolvedOptions: ``general`` always, ``socialbar``/``ga`` when triggered.
    """

    schema = schema or default_schema()
    if not isinstance(overrides, Overrides):
        overrides = Overrides(overrides)

    embed_type = _resolve_embed_type(schema, overrides, server)
    options: Dict[str, Dict[str, Any]] = {}

    for group in schema:
        if not _group_included(group, overrides, embed_type):
            continue

        values: Dict[str, Any] = {}
        for spec in group:
            key = option_lookup_key(group.name, spec.name)
            value = resolve_param(key, overrides, spec, server)

            if group.name == ANALYTICS_GROUP and spec.name == ANALYTICS_LABEL_OPTION and value == "":
                value = video.name

            if is_kept_value(value):
                values[spec.name] = value

        if group.name == SOCIALBAR_GROUP and SOCIALBAR_TRIGGER_OPTION not in values:
            logger.debug("[Options] Dropping socialbar group without any valid buttons")
            continue
        if values or group.name == GENERAL_GROUP:
            options[group.name] = values

    if server is not None and server.is_secure:
        options.setdefault(GENERAL_GROUP, {})["ssl"] = True

    logger.kv_debug(
        "[Options] Resolved embed options",
        kv_pairs={
            "Type": embed_type,
            "Groups": ",".join(options),
            "Secure": bool(server and server.is_secure),
        },
    )
    return ResolvedOptions(options)


__all__ = [
    "ResolvedOptions",
    "build_options",
    "is_kept_value",
    "option_lookup_key",
]
