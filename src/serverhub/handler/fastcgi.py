"""FastCGI server backed by flup."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from flup.server.fcgi import WSGIServer

from serverhub.handler.base import BaseHandler, WSGIApp

logger = logging.getLogger(__name__)

BindAddress = Union[str, Tuple[str, int], None]


class FastCGI(BaseHandler):
    @classmethod
    def bind_address(cls, options: Mapping[str, Any]) -> BindAddress:
        # No file and no port: use the socket inherited from the web server.
        if options.get("file"):
            return str(options["file"])
        if options.get("port"):
            return cls._host(options), cls._port(options)
        return None

    @classmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        bind = cls.bind_address(options or {})
        logger.info("fastcgi serving | bind=%s", bind or "inherited")
        WSGIServer(app, bindAddress=bind).run()

    @classmethod
    def valid_options(cls) -> Dict[str, str]:
        options = super().valid_options()
        options["file=PATH"] = "Creates a Domain socket at PATH instead of a TCP socket"
        return options


__all__ = ["FastCGI"]
