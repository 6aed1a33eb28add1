"""Settings utilities for wistiaembed."""

from .io import load_config
from .merge import merge_configs
from .settings import Settings, load_settings
from .validate import validate_settings

__all__ = ["Settings", "load_config", "load_settings", "merge_configs", "validate_settings"]
