"""Type sanitizers for raw template parameter values.

Every sanitizer takes ``(value, default, extra)`` and returns a canonical value.
None of them raise: a value outside the type's domain yields ``default``.
``extra`` carries the allowed values for ``list``/``multiselect`` and the
:class:`~wistiaembed.params.types.ServerContext` for ``url``.
"""

from __future__ import annotations

import re
import string
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
from urllib.parse import urlsplit

from .types import ParamType, ServerContext

Sanitizer = Callable[[Any, Any, Any], Any]

TRUE_WORDS = frozenset({"true", "yes", "y"})
FALSE_WORDS = frozenset({"false", "no", "n"})

MULTISELECT_SEPARATOR = "|"
# the iframe embed joins socialbar buttons with ``-``
MULTISELECT_JOINED_SEPARATOR = "-"
DIGITS_RE = re.compile(r"[0-9]+")
_HEX_DIGITS = frozenset(string.hexdigits)


def parse_bool_word(value: Any) -> Optional[bool]:
    """Return the boolean a literal or word stands for, or ``None``."""

    if isinstance(value, bool):
        return value
    if not isinstance(value, str):
        return None
    word = value.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return None


def sanitize_bool(value: Any, default: Any, extra: Any = None) -> bool:
    parsed = parse_bool_word(value)
    if parsed is not None:
        return parsed
    parsed_default = parse_bool_word(default)
    if parsed_default is not None:
        return parsed_default
    if isinstance(default, str):
        return False
    return bool(default)


def sanitize_hex(value: Any, default: Any, extra: Any = None) -> Any:
    """Normalize a hex color to six digits without ``#``.

    ``"abc"`` becomes ``"aabbcc"`` and ``"#fff"`` becomes ``"ffffff"``.
    """

    if not isinstance(value, str):
        return default
    candidate = value.strip()
    if candidate.startswith("#"):
        candidate = candidate[1:]
    if len(candidate) == 3:
        candidate = "".join(ch * 2 for ch in candidate)
    if len(candidate) == 6 and all(ch in _HEX_DIGITS for ch in candidate):
        return candidate
    return default


def sanitize_int(value: Any, default: Any, extra: Any = None) -> Any:
    # bool is an int subclass but never a valid count
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value >= 0 else default
    if isinstance(value, str) and DIGITS_RE.fullmatch(value):
        return int(value)
    return default


def sanitize_list(value: Any, default: Any, extra: Any = None) -> Any:
    if not isinstance(extra, (list, tuple)) or not extra:
        return default
    try:
        return value if value in extra else default
    except TypeError:
        return default


def sanitize_multiselect(value: Any, default: Any, extra: Any = None) -> Any:
    """Intersect ``value`` with the allowed values, keeping the caller's order.

    Strings are split on ``|``. A piece that is not itself an allowed value
    is split again on ``-``, so allowed values may contain hyphens.
    """

    if not isinstance(extra, (list, tuple)) or not extra:
        return default

    tokens: Iterable[Any]
    if isinstance(value, str):
        tokens = value.split(MULTISELECT_SEPARATOR)
    elif isinstance(value, (list, tuple)):
        tokens = value
    else:
        return default

    allowed = set(extra)
    selected: List[str] = []
    for token in tokens:
        if not isinstance(token, str):
            continue
        token = token.strip()
        if token in allowed:
            pieces = [token]
        else:
            pieces = [piece.strip() for piece in token.split(MULTISELECT_JOINED_SEPARATOR)]
        for piece in pieces:
            if piece in allowed and piece not in selected:
                selected.append(piece)

    return tuple(selected) if selected else default


def sanitize_url(value: Any, default: Any, extra: Any = None) -> Any:
    """Turn a relative URL into an absolute one using the request context.

    An empty value stays empty. A value that is already absolute is kept.
    Paths starting with ``/`` are joined to the host; anything else is
    joined to the current request path as a directory.
    """

    if value is None:
        return ""
    if not isinstance(value, str):
        return default

    candidate = value.strip()
    if not candidate:
        return ""
    if "://" not in candidate:
        if not isinstance(extra, ServerContext) or not extra.host:
            return default
        base_url = f"{extra.scheme}://{extra.host}"
        if candidate.startswith("/"):
            candidate = base_url + candidate
        else:
            base_url += urlsplit(extra.request_uri or "/").path or "/"
            if not base_url.endswith("/"):
                base_url += "/"
            candidate = base_url + candidate

    return candidate if is_valid_url(candidate) else default


def sanitize_string(value: Any, default: Any, extra: Any = None) -> Any:
    return value


def is_valid_url(value: str) -> bool:
    """Check that ``value`` is a well formed absolute URL."""

    if not value or any(ch.isspace() for ch in value):
        return False
    try:
        parts = urlsplit(value)
        # accessing port validates it
        parts.port
    except ValueError:
        return False
    if not parts.scheme or not parts.scheme[0].isalpha():
        return False
    return bool(parts.netloc and parts.hostname)


_SANITIZER_REGISTRY: Dict[ParamType, Sanitizer] = {}


def register_sanitizer(param_type: ParamType, sanitizer: Sanitizer) -> None:
    """Register (or replace) the sanitizer used for ``param_type``."""

    _SANITIZER_REGISTRY[ParamType(param_type)] = sanitizer


def get_sanitizer(param_type: ParamType) -> Sanitizer:
    return _SANITIZER_REGISTRY.get(ParamType(param_type), sanitize_string)


def sanitize(param_type: ParamType, value: Any, default: Any, extra: Any = None) -> Any:
    """Apply the sanitizer registered for ``param_type``."""

    return get_sanitizer(param_type)(value, default, extra)


def reset_sanitizer_registry() -> None:
    """Restore the built-in sanitizers (for tests)."""

    _SANITIZER_REGISTRY.clear()
    _register_builtin_sanitizers()


def _register_builtin_sanitizers() -> None:
    builtins: Sequence[tuple[ParamType, Sanitizer]] = (
        (ParamType.BOOL, sanitize_bool),
        (ParamType.HEX, sanitize_hex),
        (ParamType.INT, sanitize_int),
        (ParamType.LIST, sanitize_list),
        (ParamType.MULTISELECT, sanitize_multiselect),
        (ParamType.URL, sanitize_url),
        (ParamType.STRING, sanitize_string),
    )
    for param_type, sanitizer in builtins:
        register_sanitizer(param_type, sanitizer)


_register_builtin_sanitizers()


__all__ = [
    "Sanitizer",
    "is_valid_url",
    "parse_bool_word",
    "register_sanitizer",
    "reset_sanitizer_registry",
    "sanitize",
    "sanitize_bool",
    "sanitize_hex",
    "sanitize_int",
    "sanitize_list",
    "sanitize_multiselect",
    "sanitize_string",
    "sanitize_url",
]
