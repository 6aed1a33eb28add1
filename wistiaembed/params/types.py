"""Shared value types for parameter resolution."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class ParamType(str, Enum):
    """Value type tag of a schema entry; selects the sanitizer."""

    BOOL = "bool"
    HEX = "hex"
    INT = "int"
    LIST = "list"
    MULTISELECT = "multiselect"
    URL = "url"
    STRING = "string"


@dataclass(frozen=True)
class ServerContext:
    """The parts of the current request that option resolution depends on."""

    is_secure: bool = False
    host: str = ""
    request_uri: str = "/"

    @property
    def scheme(self) -> str:
        return "https" if self.is_secure else "http"

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> "ServerContext":
        """Build a context from a WSGI/CGI style environment mapping."""

        https = str(environ.get("HTTPS", "") or "").lower()
        scheme = str(environ.get("wsgi.url_scheme", "") or "").lower()
        is_secure = (https not in ("", "off", "0")) or scheme == "https"
        host = str(environ.get("HTTP_HOST") or environ.get("SERVER_NAME") or "")
        request_uri = environ.get("REQUEST_URI")
        if not request_uri:
            request_uri = str(environ.get("PATH_INFO") or "/")
            query = environ.get("QUERY_STRING")
            if query:
                request_uri = f"{request_uri}?{query}"
        return cls(is_secure=is_secure, host=host, request_uri=str(request_uri))
