"""Single option resolution: overrides, aliases, default, sanitizer."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

from .sanitizers import sanitize
from .schema import ParameterSpec
from .types import ParamType, ServerContext


class Overrides(Mapping[str, Any]):
    """Read-only, case-insensitive view of caller supplied parameters."""

    __slots__ = ("_data",)

    def __init__(self, raw: Optional[Mapping[str, Any]] = None):
        data = {}
        for key, value in (raw or {}).items():
            if not isinstance(key, str):
                continue
            data[key.strip().lower()] = value
        self._data = MappingProxyType(data)

    @classmethod
    def from_pairs(cls, pairs: Iterable[str]) -> "Overrides":
        """Parse ``key=value`` strings, e.g. from the command line.

        A bare ``key`` is read as ``key=yes``. Later pairs win.
        """

        raw = {}
        for pair in pairs:
            key, sep, value = pair.partition("=")
            key = key.strip()
            if not key:
                continue
            raw[key] = value if sep else "yes"
        return cls(raw)

    def __getitem__(self, key: str) -> Any:
        return self._data[key.lower()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Overrides({dict(self._data)!r})"

    def has_namespace(self, namespace: str) -> bool:
        """True when ``namespace`` or any ``namespace:*`` key is present."""

        prefix = f"{namespace.lower()}:"
        return namespace in self or any(key.startswith(prefix) for key in self._data)


def lookup_keys(key: str, spec: ParameterSpec) -> Tuple[str, ...]:
    """Keys tried for ``spec``, primary first, then aliases in declared order."""

    return tuple(k.lower() for k in (key, *spec.aliases))


def find_candidate(key: str, overrides: Mapping[str, Any], spec: ParameterSpec) -> Any:
    """Return the first override present for ``key`` or its aliases, else the default."""

    for candidate_key in lookup_keys(key, spec):
        if candidate_key in overrides:
            return overrides[candidate_key]
    return spec.default


def resolve_param(
    key: str,
    overrides: Mapping[str, Any],
    spec: ParameterSpec,
    server: Optional[ServerContext] = None,
) -> Any:
    """Resolve the effective, sanitized value of one option."""

    if not isinstance(overrides, Overrides):
        overrides = Overrides(overrides)
    candidate = find_candidate(key, overrides, spec)
    extra: Any = server if spec.type is ParamType.URL else spec.values
    return sanitize(spec.type, candidate, spec.default, extra)


__all__ = ["Overrides", "find_candidate", "lookup_keys", "resolve_param"]
