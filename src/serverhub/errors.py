"""Error types raised while resolving server handlers."""

from __future__ import annotations

from typing import Optional, Sequence


class HandlerError(Exception):
    """Base class for handler resolution failures."""


class HandlerLoadError(HandlerError, ImportError):
    """The module expected to define a handler could not be imported."""


class HandlerNameError(HandlerError, LookupError):
    """An identifier does not point at a loaded class."""


class ResolutionError(HandlerError, LookupError):
    """No handler could be found for the requested name(s)."""

    def __init__(self, names: Sequence[str], cause: Optional[BaseException] = None) -> None:
        self.names = list(names)
        self.cause = cause
        super().__init__(f"Couldn't find handler for: {', '.join(self.names)}.")


class AppImportError(ImportError):
    """A WSGI application reference could not be imported."""


__all__ = [
    "HandlerError",
    "HandlerLoadError",
    "HandlerNameError",
    "ResolutionError",
    "AppImportError",
]
