"""Schema-driven resolution of embed parameters."""

from .builder import ResolvedOptions, build_options
from .resolver import Overrides, resolve_param
from .schema import ParameterGroup, ParameterSpec, Schema, default_schema, load_schema
from .types import ParamType, ServerContext

__all__ = [
    "Overrides",
    "ParamType",
    "ParameterGroup",
    "ParameterSpec",
    "ResolvedOptions",
    "Schema",
    "ServerContext",
    "build_options",
    "default_schema",
    "load_schema",
    "resolve_param",
]
