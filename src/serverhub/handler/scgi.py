"""SCGI server backed by flup."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from flup.server.scgi import WSGIServer

from serverhub.handler.base import BaseHandler, WSGIApp

logger = logging.getLogger(__name__)


class SCGI(BaseHandler):
    @classmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        options = options or {}
        bind = (cls._host(options), cls._port(options))
        logger.info("scgi serving | host=%s | port=%s", *bind)
        WSGIServer(app, bindAddress=bind, scriptName=str(options.get("script_name", ""))).run()


__all__ = ["SCGI"]
