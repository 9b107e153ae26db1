"""Pre-fork server backed by gunicorn."""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from gunicorn.app.base import BaseApplication

from serverhub.handler.base import BaseHandler, WSGIApp

logger = logging.getLogger(__name__)


class _EmbeddedApplication(BaseApplication):
    """Feeds a ready-made WSGI callable and settings to gunicorn's arbiter."""

    def __init__(self, app: WSGIApp, settings: Mapping[str, Any]) -> None:
        self.application = app
        self.settings = dict(settings)
        super().__init__()

    def load_config(self) -> None:
        for key, value in self.settings.items():
            if key in self.cfg.settings and value is not None:
                self.cfg.set(key, value)

    def load(self) -> WSGIApp:
        return self.application


class Gunicorn(BaseHandler):
    @classmethod
    def build(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> _EmbeddedApplication:
        options = dict(options or {})
        host, port = cls._host(options), cls._port(options)
        options.pop("host", None)
        options.pop("port", None)
        settings: Dict[str, Any] = {"bind": f"{host}:{port}", "workers": 1}
        settings.update(options)
        return _EmbeddedApplication(app, settings)

    @classmethod
    def run(cls, app: WSGIApp, options: Optional[Mapping[str, Any]] = None) -> None:
        application = cls.build(app, options)
        logger.info("gunicorn serving | bind=%s", application.cfg.bind)
        application.run()

    @classmethod
    def valid_options(cls) -> Dict[str, str]:
        options = super().valid_options()
        options["workers=NUM"] = "Number of worker processes (default: 1)"
        return options


__all__ = ["Gunicorn"]
