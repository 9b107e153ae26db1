"""Serve a WSGI application as a single CGI request."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from wsgiref.handlers import CGIHandler

from serverhub.handler.base import BaseHandler, WSGIApp


class CGI(BaseHandler):
    """Runs the application once against the current process environment."""

    @classmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        CGIHandler().run(app)

    @classmethod
    def valid_options(cls) -> Dict[str, str]:
        return {}


__all__ = ["CGI"]
