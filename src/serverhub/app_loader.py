"""Import WSGI applications from ``module:attribute`` references."""

from __future__ import annotations

import importlib
from typing import Any

from serverhub.errors import AppImportError


def import_app(reference: str) -> Any:
    """Import ``package.module:attribute`` and return the callable it names.

    The attribute part defaults to ``application`` and may be dotted
    (``module:factory.app``).
    """

    module_path, _, attribute = reference.partition(":")
    if not module_path:
        raise AppImportError(f"Invalid application reference '{reference}'.")
    attribute = attribute or "application"

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise AppImportError(f"Failed to import module '{module_path}': {exc}") from exc

    app: Any = module
    for part in attribute.split("."):
        try:
            app = getattr(app, part)
        except AttributeError as exc:
            raise AppImportError(f"Attribute '{attribute}' not found in module '{module_path}'.") from exc

    if not callable(app):
        raise AppImportError(f"'{reference}' is not a callable WSGI application.")
    return app


__all__ = ["import_app"]
