"""Interface every server handler implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Mapping, Optional

WSGIApp = Callable[..., Any]

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080


class BaseHandler(ABC):
    """
    Connects a WSGI application to a concrete server.

    Handlers are used as classes: ``Handler.run(app, options)`` starts serving
    and blocks until the server stops.
    """

    @classmethod
    @abstractmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        """Serve ``app`` with the given server options."""

    @classmethod
    def valid_options(cls) -> Dict[str, str]:
        """Return the options this handler understands, keyed by flag."""

        return {
            "host=HOST": f"Hostname to listen on (default: {DEFAULT_HOST})",
            "port=PORT": f"Port to listen on (default: {DEFAULT_PORT})",
        }

    @staticmethod
    def _host(options: Mapping[str, Any]) -> str:
        return str(options.get("host") or DEFAULT_HOST)

    @staticmethod
    def _port(options: Mapping[str, Any]) -> int:
        return int(options.get("port") or DEFAULT_PORT)


__all__ = ["WSGIApp", "BaseHandler", "DEFAULT_HOST", "DEFAULT_PORT"]
