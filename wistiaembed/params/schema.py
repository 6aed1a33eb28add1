"""Declarative parameter schema: groups of named, typed options."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

import yaml
from yaml import YAMLError

from ..exceptions import ConfigurationError
from .legacy import upgrade_legacy_schema
from .sanitizers import (
    is_valid_url,
    parse_bool_word,
    sanitize_hex,
    sanitize_int,
    sanitize_multiselect,
)
from .types import ParamType

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().with_name("parameters.json")

GENERAL_GROUP = "general"
SOCIALBAR_GROUP = "socialbar"
ANALYTICS_GROUP = "ga"

_SPEC_KEYS = {"type", "default", "values", "aliases"}
_VALUE_TYPES = {ParamType.LIST, ParamType.MULTISELECT}


@dataclass(frozen=True)
class ParameterSpec:
    """One typed option of the schema."""

    name: str
    type: ParamType
    default: Any
    values: Tuple[Any, ...] = ()
    aliases: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ParameterGroup:
    """Named, ordered collection of options."""

    name: str
    params: Tuple[ParameterSpec, ...]

    def __iter__(self) -> Iterator[ParameterSpec]:
        return iter(self.params)

    def __len__(self) -> int:
        return len(self.params)

    def get(self, name: str) -> Optional[ParameterSpec]:
        for spec in self.params:
            if spec.name == name:
                return spec
        return None

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(spec.name for spec in self.params)


@dataclass(frozen=True)
class Schema:
    """The full parameter schema in declared group order."""

    groups: Tuple[ParameterGroup, ...]

    def __iter__(self) -> Iterator[ParameterGroup]:
        return iter(self.groups)

    def group(self, name: str) -> Optional[ParameterGroup]:
        for group in self.groups:
            if group.name == name:
                return group
        return None

    @property
    def group_names(self) -> Tuple[str, ...]:
        return tuple(group.name for group in self.groups)


def parse_parameter_spec(name: str, raw: Any, *, group: str) -> ParameterSpec:
    """Validate one raw schema entry and normalize its default to its type."""

    if not isinstance(raw, dict):
        raise ConfigurationError("Parameter entry must be a mapping", group, name)

    unknown_keys = set(raw.keys()) - _SPEC_KEYS
    if unknown_keys:
        raise ConfigurationError(
            f"Unknown keys {sorted(unknown_keys)} in parameter entry", group, name
        )
    if "type" not in raw:
        raise ConfigurationError("Parameter entry is missing 'type'", group, name)
    if "default" not in raw:
        raise ConfigurationError("Parameter entry is missing 'default'", group, name)

    try:
        param_type = ParamType(raw["type"])
    except ValueError:
        raise ConfigurationError(f"Unknown parameter type {raw['type']!r}", group, name)

    values_raw = raw.get("values", ())
    if not isinstance(values_raw, (list, tuple)):
        raise ConfigurationError("'values' must be a list", group, name)
    values = tuple(values_raw)
    if param_type in _VALUE_TYPES and not values:
        raise ConfigurationError(
            f"Type {param_type.value!r} requires a non-empty 'values' list", group, name
        )

    aliases_raw = raw.get("aliases", ())
    if not isinstance(aliases_raw, (list, tuple)) or not all(
        isinstance(alias, str) and alias.strip() for alias in aliases_raw
    ):
        raise ConfigurationError("'aliases' must be a list of names", group, name)
    aliases = tuple(alias.strip() for alias in aliases_raw)

    default = _normalize_default(param_type, raw["default"], values, group=group, name=name)
    return ParameterSpec(
        name=name,
        type=param_type,
        default=default,
        values=values,
        aliases=aliases,
    )


def _normalize_default(
    param_type: ParamType, default: Any, values: Tuple[Any, ...], *, group: str, name: str
) -> Any:
    """Return ``default`` as the typed value the sanitizers would produce.

    ``""`` is kept for every non-bool type and means "no value".
    """

    def invalid() -> ConfigurationError:
        return ConfigurationError(
            f"Default {default!r} is not a valid {param_type.value}", group, name
        )

    if param_type is ParamType.BOOL:
        parsed = parse_bool_word(default)
        if parsed is None:
            raise invalid()
        return parsed

    if default == "" and not isinstance(default, bool):
        return ""

    if param_type is ParamType.HEX:
        normalized = sanitize_hex(default, None)
        if normalized is None:
            raise invalid()
        return normalized
    if param_type is ParamType.INT:
        normalized = sanitize_int(default, None)
        if normalized is None:
            raise invalid()
        return normalized
    if param_type is ParamType.LIST:
        if default not in values:
            raise invalid()
        return default
    if param_type is ParamType.MULTISELECT:
        normalized = sanitize_multiselect(default, None, values)
        if normalized is None:
            raise invalid()
        return normalized
    if param_type is ParamType.URL:
        if not isinstance(default, str) or not is_valid_url(default):
            raise invalid()
        return default
    if isinstance(default, (dict, list)):
        raise invalid()
    return default


def parse_schema(raw: Any) -> Schema:
    """Build a :class:`Schema` from the decoded schema document."""

    if not isinstance(raw, dict) or not raw:
        raise ConfigurationError("Parameter schema must be a non-empty mapping")

    upgraded = upgrade_legacy_schema(raw)
    if GENERAL_GROUP not in upgraded:
        raise ConfigurationError(f"Parameter schema has no {GENERAL_GROUP!r} group")

    groups = []
    for group_name, group_raw in upgraded.items():
        if not isinstance(group_name, str) or not group_name.strip():
            raise ConfigurationError("Group names must be non-empty strings")
        if not isinstance(group_raw, dict):
            raise ConfigurationError("Group must be a mapping of options", group_name)
        params = tuple(
            parse_parameter_spec(str(option_name), entry, group=group_name)
            for option_name, entry in group_raw.items()
        )
        groups.append(ParameterGroup(name=group_name, params=params))

    return Schema(groups=tuple(groups))


def load_schema(path: str | Path) -> Schema:
    """Read and validate a schema document (JSON, or YAML for hand-written files)."""

    schema_path = Path(path)
    try:
        with schema_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except FileNotFoundError:
        raise ConfigurationError(f"Parameter schema not found: {schema_path}")
    except YAMLError as e:
        raise ConfigurationError(f"Invalid parameter schema {schema_path}: {e}")
    return parse_schema(raw)


@lru_cache(maxsize=None)
def default_schema() -> Schema:
    """The bundled schema, read once per process."""

    return load_schema(DEFAULT_SCHEMA_PATH)


__all__ = [
    "ANALYTICS_GROUP",
    "DEFAULT_SCHEMA_PATH",
    "GENERAL_GROUP",
    "ParameterGroup",
    "ParameterSpec",
    "SOCIALBAR_GROUP",
    "Schema",
    "default_schema",
    "load_schema",
    "parse_parameter_spec",
    "parse_schema",
]
