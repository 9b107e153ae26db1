"""Development server backed by the standard library's ``wsgiref``."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from wsgiref.simple_server import WSGIRequestHandler, make_server

from serverhub.handler.base import BaseHandler, WSGIApp

logger = logging.getLogger(__name__)


class _LoggingRequestHandler(WSGIRequestHandler):
    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s | %s", self.address_string(), format % args)


class WSGIRef(BaseHandler):
    """Single-threaded server for local development."""

    @classmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        options = options or {}
        host, port = cls._host(options), cls._port(options)
        server = make_server(host, port, app, handler_class=_LoggingRequestHandler)
        logger.info("wsgiref serving | host=%s | port=%s", host, server.server_port)
        try:
            server.serve_forever()
        finally:
            server.server_close()


__all__ = ["WSGIRef"]
