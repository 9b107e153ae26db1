from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import typer

from serverhub import handler
from serverhub.app_loader import import_app
from serverhub.config import load_settings
from serverhub.errors import AppImportError, ResolutionError
from serverhub.utils.logging import setup_logging

app = typer.Typer(no_args_is_help=True, add_completion=False, help="Run WSGI applications under pluggable servers.")
logger = logging.getLogger(__name__)


def _prepare(config: Optional[str], log_level: Optional[str]) -> handler.Registry:
    settings = load_settings(config)
    setup_logging(level=log_level or settings.log_level)
    registry = handler.REGISTRY
    if config:
        registry.configure(settings)
        logger.info("CONFIG_LOADED | path=%s | namespace=%s", config, settings.namespace)
    return registry


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


@app.command("serve")
def serve(
    application: str = typer.Argument(..., help="WSGI application as module:attribute."),
    server: Optional[List[str]] = typer.Option(
        None,
        "--server",
        "-s",
        help="Handler name to try; repeat to give fallbacks in order. Guessed from the environment when omitted.",
    ),
    host: Optional[str] = typer.Option(None, "--host", help="Hostname to listen on."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a handler settings YAML."),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level (INFO, DEBUG, WARNING, ERROR)."),
) -> None:
    registry = _prepare(config, log_level)
    try:
        wsgi_app = import_app(application)
    except AppImportError as exc:
        logger.error("APP_ERROR | %s", exc)
        raise typer.Exit(code=1)

    options: Dict[str, Any] = {key: value for key, value in (("host", host), ("port", port)) if value is not None}
    try:
        handler_cls = registry.pick(server) if server else registry.default(options)
    except ResolutionError as exc:
        logger.error("HANDLER_ERROR | %s", exc)
        raise typer.Exit(code=1)

    logger.info("HANDLER_SELECTED | handler=%s | options=%s", _qualified_name(handler_cls), options)
    try:
        handler_cls.run(wsgi_app, options)
    except OSError as exc:
        logger.error("SERVER_ERROR | handler=%s | %s", _qualified_name(handler_cls), exc)
        raise typer.Exit(code=1)


@app.command("which")
def which(
    names: List[str] = typer.Argument(..., help="Handler names in order of preference."),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a handler settings YAML."),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level."),
) -> None:
    registry = _prepare(config, log_level)
    try:
        handler_cls = registry.pick(names)
    except ResolutionError as exc:
        logger.error("HANDLER_ERROR | %s", exc)
        raise typer.Exit(code=1)
    typer.echo(_qualified_name(handler_cls))


@app.command("handlers")
def list_handlers(
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to a handler settings YAML."),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Logging level."),
) -> None:
    registry = _prepare(config, log_level)
    for name in registry.names():
        typer.echo(f"{name} -> {registry.identifier(name)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
