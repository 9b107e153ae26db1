"""Production server backed by waitress."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import waitress

from serverhub.handler.base import BaseHandler, WSGIApp

logger = logging.getLogger(__name__)

DEFAULT_THREADS = 4


class Waitress(BaseHandler):
    @classmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        options = options or {}
        host, port = cls._host(options), cls._port(options)
        threads = int(options.get("threads") or DEFAULT_THREADS)
        logger.info("waitress serving | host=%s | port=%s | threads=%s", host, port, threads)
        waitress.serve(app, host=host, port=port, threads=threads)

    @classmethod
    def valid_options(cls) -> Dict[str, str]:
        options = super().valid_options()
        options["threads=NUM"] = f"Number of worker threads (default: {DEFAULT_THREADS})"
        return options


__all__ = ["Waitress"]
