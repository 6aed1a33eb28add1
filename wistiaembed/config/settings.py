"""Plugin settings: defaults, then a YAML file, then ``WISTIA_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..exceptions import ValidationError
from ..api.client import WistiaClient
from ..params.schema import Schema, default_schema, load_schema
from ..params.types import ServerContext
from .io import load_config
from .merge import merge_configs
from .validate import validate_settings

DEFAULT_SETTINGS: Dict[str, Any] = {
    "api_key": "",
    "projects": [],
    "timeout": 10.0,
    "retries": 3,
    "retry_wait": 1.0,
    "schema_path": None,
    "server": {"https": False, "host": "", "request_uri": "/"},
}


@dataclass(frozen=True)
class Settings:
    api_key: str = ""
    projects: Tuple[str, ...] = ()
    timeout: float = 10.0
    retries: int = 3
    retry_wait: float = 1.0
    schema_path: Optional[str] = None
    server: ServerContext = field(default_factory=ServerContext)

    def load_schema(self) -> Schema:
        if self.schema_path:
            return load_schema(self.schema_path)
        return default_schema()

    def create_client(self, **kwargs: Any) -> WistiaClient:
        return WistiaClient(
            self.api_key,
            timeout=self.timeout,
            retries=self.retries,
            retry_wait=self.retry_wait,
            **kwargs,
        )


def settings_from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    """Read ``WISTIA_API_KEY``, ``WISTIA_PROJECTS`` (comma separated),
    ``WISTIA_TIMEOUT`` and ``WISTIA_SCHEMA``."""

    layer: Dict[str, Any] = {}
    if env.get("WISTIA_API_KEY"):
        layer["api_key"] = env["WISTIA_API_KEY"].strip()
    if env.get("WISTIA_PROJECTS"):
        layer["projects"] = [p.strip() for p in env["WISTIA_PROJECTS"].split(",") if p.strip()]
    if env.get("WISTIA_TIMEOUT"):
        try:
            layer["timeout"] = float(env["WISTIA_TIMEOUT"])
        except ValueError:
            raise ValidationError(
                f"WISTIA_TIMEOUT must be a number of seconds, got {env['WISTIA_TIMEOUT']!r}"
            )
    if env.get("WISTIA_SCHEMA"):
        layer["schema_path"] = env["WISTIA_SCHEMA"]
    return layer


def load_settings(
    config_path: Optional[str] = None, env: Optional[Mapping[str, str]] = None
) -> Settings:
    """Load, merge and validate settings.

    Args:
        config_path: Optional YAML settings file.
        env: Environment mapping, ``os.environ`` when omitted.
    """
    file_layer = load_config(config_path) if config_path else {}
    env_layer = settings_from_env(os.environ if env is None else env)
    merged = merge_configs(DEFAULT_SETTINGS, file_layer, env_layer)
    validate_settings(merged)

    server_cfg = merged["server"]
    return Settings(
        api_key=merged["api_key"] or "",
        projects=tuple(str(p) for p in merged["projects"]),
        timeout=float(merged["timeout"]),
        retries=int(merged["retries"]),
        retry_wait=float(merged["retry_wait"]),
        schema_path=merged.get("schema_path"),
        server=ServerContext(
            is_secure=bool(server_cfg.get("https", False)),
            host=server_cfg.get("host") or "",
            request_uri=server_cfg.get("request_uri") or "/",
        ),
    )
