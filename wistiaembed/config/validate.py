from numbers import Real
from typing import Any, Dict

from ..exceptions import ValidationError

KNOWN_KEYS = {"api_key", "projects", "timeout", "retries", "retry_wait", "schema_path", "server"}
SERVER_KEYS = {"https", "host", "request_uri"}


def _validate_server(cfg: Any) -> None:
    if not isinstance(cfg, dict):
        raise ValidationError("'server' section must be a dictionary when provided.")
    unknown = set(cfg) - SERVER_KEYS
    if unknown:
        raise ValidationError(f"Unknown keys in 'server': {sorted(unknown)}")
    https = cfg.get("https")
    if https is not None and not isinstance(https, bool):
        raise ValidationError("'server.https' must be a boolean.")
    for key in ("host", "request_uri"):
        val = cfg.get(key)
        if val is not None and not isinstance(val, str):
            raise ValidationError(f"'server.{key}' must be a string.")


def validate_settings(config: Dict[str, Any]) -> None:
    """Validate merged plugin settings.

    Raises
    ------
    ValidationError
        If a key is unknown or has the wrong type.
    """
    unknown = set(config) - KNOWN_KEYS
    if unknown:
        raise ValidationError(f"Unknown settings keys: {sorted(unknown)}")

    api_key = config.get("api_key")
    if api_key is not None and not isinstance(api_key, str):
        raise ValidationError("'api_key' must be a string.")

    projects = config.get("projects")
    if projects is not None:
        if not isinstance(projects, list):
            raise ValidationError("'projects' must be a list of project IDs.")
        for idx, project in enumerate(projects):
            if isinstance(project, bool) or not isinstance(project, (str, int)):
                raise ValidationError(f"'projects[{idx}]' must be a string or integer ID.")

    timeout = config.get("timeout")
    if timeout is not None and (
        isinstance(timeout, bool) or not isinstance(timeout, Real) or timeout <= 0
    ):
        raise ValidationError("'timeout' must be a positive number of seconds.")

    retries = config.get("retries")
    if retries is not None and (
        isinstance(retries, bool) or not isinstance(retries, int) or retries < 1
    ):
        raise ValidationError("'retries' must be a positive integer.")

    retry_wait = config.get("retry_wait")
    if retry_wait is not None and (
        isinstance(retry_wait, bool) or not isinstance(retry_wait, Real) or retry_wait < 0
    ):
        raise ValidationError("'retry_wait' must be a non-negative number of seconds.")

    schema_path = config.get("schema_path")
    if schema_path is not None and not isinstance(schema_path, str):
        raise ValidationError("'schema_path' must be a string path.")

    server = config.get("server")
    if server is not None:
        _validate_server(server)
