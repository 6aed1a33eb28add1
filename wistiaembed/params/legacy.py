"""Upgrade older parameter schema layouts to the grouped layout."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict

from wistiaembed.utils.logger import logger

LEGACY_OPTION_RENAMES = {
    # group -> {old option name: new option name}
    "socialbar": {"icons": "buttons"},
}


def is_flat_schema(raw: Dict[str, Any]) -> bool:
    """A flat schema maps option names straight to specs, without groups."""

    if not raw:
        return False
    # a grouped schema may hold an option called "type"; its value is a dict
    return all(
        isinstance(entry, dict) and isinstance(entry.get("type"), str)
        for entry in raw.values()
    )


def upgrade_legacy_schema(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Return ``raw`` in the grouped layout, renaming legacy option keys.

    The input is left untouched.
    """

    upgraded = deepcopy(raw)
    if is_flat_schema(upgraded):
        logger.info("[Schema] Upgrading flat parameter schema into the 'general' group")
        upgraded = {"general": upgraded}

    for group_name, renames in LEGACY_OPTION_RENAMES.items():
        group = upgraded.get(group_name)
        if not isinstance(group, dict):
            continue
        for old, new in renames.items():
            if old in group and new not in group:
                logger.info("[Schema] Renaming legacy option %s.%s to %s", group_name, old, new)
                group = {(new if key == old else key): value for key, value in group.items()}
        upgraded[group_name] = group

    return upgraded


__all__ = ["is_flat_schema", "upgrade_legacy_schema"]
