from typing import Any, Dict, Mapping


def merge_configs(base: Mapping[str, Any], *overrides: Mapping[str, Any]) -> Dict[str, Any]:
    """Deep-merge settings layers left to right; later layers win.

    Nested mappings are merged key by key. ``None`` in a later layer means
    "not set" and keeps the earlier value.
    """
    merged: Dict[str, Any] = dict(base)
    for layer in overrides:
        for key, value in layer.items():
            if value is None:
                continue
            current = merged.get(key)
            if isinstance(value, Mapping) and isinstance(current, Mapping):
                merged[key] = merge_configs(current, value)
            else:
                merged[key] = value
    return merged
