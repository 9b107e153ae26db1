"""
Server handlers connect WSGI applications with web servers.

serverhub ships handlers for CGI, FastCGI, SCGI, wsgiref, waitress and
gunicorn. Handlers are looked up by name through a :class:`Registry`:

    >>> from serverhub import handler
    >>> handler.pick(["thin", "wsgiref"])
    <class 'serverhub.handler.wsgiref.WSGIRef'>

An unregistered name is looked for in ``<namespace>.<underscored name>``, so a
module ``serverhub/handler/my_server.py`` defining ``MyServer`` is found by
``get("MyServer")`` without any registration. Such a module may also call
:func:`register` itself when it is imported.
"""

from __future__ import annotations

import importlib
import inspect
import logging
import os
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Union

from serverhub.errors import HandlerLoadError, HandlerNameError, ResolutionError
from serverhub.handler.naming import class_from_string, underscore

if TYPE_CHECKING:
    from serverhub.config import HandlerSettings

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "serverhub.handler"
DEFAULT_ENV_VAR = "SERVERHUB_HANDLER"
DEFAULT_PREFERENCE = ("waitress", "gunicorn", "wsgiref")

BUILTIN_HANDLERS: Dict[str, str] = {
    "cgi": "serverhub.handler.cgi.CGI",
    "fastcgi": "serverhub.handler.fastcgi.FastCGI",
    "scgi": "serverhub.handler.scgi.SCGI",
    "wsgiref": "serverhub.handler.wsgiref.WSGIRef",
    "waitress": "serverhub.handler.waitress.Waitress",
    "gunicorn": "serverhub.handler.gunicorn.Gunicorn",
}

# Registrations made through the module-level `register`, visible to every
# registry whose namespace contains the identifier.
_SELF_REGISTERED: Dict[str, str] = {}
_LOADING: List["Registry"] = []


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one handler name."""

    name: str
    handler: Optional[type] = None
    load_error: Optional[HandlerLoadError] = None
    name_error: Optional[HandlerNameError] = None

    @property
    def ok(self) -> bool:
        return self.handler is not None

    @property
    def error(self) -> Optional[Exception]:
        return self.name_error or self.load_error


def _identifier(value: Any) -> str:
    if inspect.isclass(value):
        return f"{value.__module__}.{value.__qualname__}"
    return str(value)


def _load_error(message: str, cause: BaseException) -> HandlerLoadError:
    error = HandlerLoadError(message)
    error.__cause__ = cause
    return error


class Registry:
    """Maps handler names to the dotted paths of the classes implementing them."""

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        handlers: Optional[Mapping[str, Any]] = None,
        *,
        preference: Optional[Iterable[str]] = None,
        env_var: str = DEFAULT_ENV_VAR,
    ) -> None:
        self.namespace = namespace
        self.preference: List[str] = list(preference if preference is not None else DEFAULT_PREFERENCE)
        self.env_var = env_var
        self._handlers: Dict[str, str] = {}
        for name, identifier in (BUILTIN_HANDLERS if handlers is None else handlers).items():
            self.register(name, identifier)

    @classmethod
    def from_settings(cls, settings: "HandlerSettings") -> "Registry":
        return cls().configure(settings)

    def configure(self, settings: "HandlerSettings") -> "Registry":
        """Apply lookup settings and register any configured handlers."""

        self.namespace = settings.namespace
        self.preference = list(settings.preference)
        self.env_var = settings.env_var
        for name, identifier in settings.handlers.items():
            self.register(name, identifier)
        return self

    # registration ----------------------------------------------------------
    def register(self, name: Any, identifier: Any) -> None:
        """Bind ``name`` to a class path. Nothing is imported until resolution."""

        self._handlers[str(name)] = _identifier(identifier)

    def names(self) -> List[str]:
        return sorted(self._handlers)

    def identifier(self, name: Any) -> Optional[str]:
        return self._handlers.get(str(name))

    def __contains__(self, name: object) -> bool:
        return str(name) in self._handlers

    # resolution ------------------------------------------------------------
    def resolve(self, name: Any) -> Resolution:
        """Resolve ``name`` to a handler class without raising on failure."""

        name = str(name)
        if not name:
            return Resolution(name, name_error=HandlerNameError("Empty handler name."))

        load_error = None
        if name not in self._handlers:
            load_error = self._try_import(name)

        try:
            handler = self._lookup(name)
        except HandlerNameError as exc:
            logger.debug("Handler lookup failed | name=%s | error=%s", name, exc)
            return Resolution(name, load_error=load_error, name_error=exc)
        except ImportError as exc:
            logger.debug("Handler import failed | name=%s | error=%s", name, exc)
            error = _load_error(f"Failed to load handler '{name}': {exc}", exc)
            return Resolution(name, load_error=error)

        logger.debug("Handler resolved | name=%s | handler=%s", name, _identifier(handler))
        return Resolution(name, handler=handler, load_error=load_error)

    def get(self, name: Any) -> Optional[type]:
        """Return the handler class for ``name``; raise ``ResolutionError`` if there is none."""

        if not name:
            return None
        return self._require(name)

    def pick(self, names: Union[str, Iterable[Any], None]) -> type:
        """
        Select the first available handler given a list of server names.

            >>> registry.pick(["thin", "wsgiref"])
            <class 'serverhub.handler.wsgiref.WSGIRef'>
        """
        if names is None:
            candidates: List[str] = []
        elif isinstance(names, str):
            candidates = [names]
        else:
            candidates = [str(name) for name in names]

        for name in candidates:
            resolution = self.resolve(name)
            if resolution.ok:
                return resolution.handler
        raise ResolutionError(candidates)

    def default(
        self,
        options: Optional[MutableMapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> type:
        """
        Guess the handler from the process environment.

        The override variable counts as soon as it is set; an empty value fails
        resolution rather than falling through to the preference list.
        """

        environ = os.environ if environ is None else environ
        if options is None:
            options = {}

        if "PHP_FCGI_CHILDREN" in environ:
            # Already speaking FastCGI on an inherited socket.
            options.pop("file", None)
            options.pop("port", None)
            return self.get("fastcgi")
        if "REQUEST_METHOD" in environ:
            return self.get("cgi")
        if self.env_var in environ:
            return self._require(environ[self.env_var])
        return self.pick(self.preference)

    # internals -------------------------------------------------------------
    def _require(self, name: Any) -> type:
        resolution = self.resolve(name)
        if not resolution.ok:
            raise ResolutionError([resolution.name], cause=resolution.error) from resolution.error
        return resolution.handler

    def _try_import(self, name: str) -> Optional[HandlerLoadError]:
        module_name = f"{self.namespace}.{underscore(name)}"
        _LOADING.append(self)
        try:
            importlib.import_module(module_name)
        except ImportError as exc:
            logger.debug("Handler module not importable | module=%s | error=%s", module_name, exc)
            return _load_error(f"Cannot load handler module '{module_name}': {exc}", exc)
        finally:
            _LOADING.pop()
        return None

    def _self_registered(self, name: str) -> Optional[str]:
        identifier = _SELF_REGISTERED.get(name)
        if identifier and identifier.startswith(f"{self.namespace}."):
            return identifier
        return None

    def _lookup(self, name: str) -> type:
        identifier = self._handlers.get(name) or self._self_registered(name) or name
        if "." in identifier:
            return class_from_string(identifier)
        return self._lookup_in_namespace(identifier)

    def _lookup_in_namespace(self, name: str) -> type:
        for module_name in (self.namespace, f"{self.namespace}.{underscore(name)}"):
            candidate = getattr(sys.modules.get(module_name), name, None)
            # Unregistered lookups only accept classes honoring the handler contract.
            if inspect.isclass(candidate) and callable(getattr(candidate, "run", None)):
                return candidate
        raise HandlerNameError(f"No handler class '{name}' loaded in '{self.namespace}'.")


REGISTRY = Registry()


def register(name: Any, identifier: Any) -> None:
    """
    Register a handler from application or handler-module code.

    Called while a registry imports a handler module, the binding goes to that
    registry; otherwise to the process default registry.
    """
    target = _LOADING[-1] if _LOADING else REGISTRY
    target.register(name, identifier)
    _SELF_REGISTERED[str(name)] = _identifier(identifier)


def get(name: Any) -> Optional[type]:
    return REGISTRY.get(name)


def pick(names: Union[str, Iterable[Any], None]) -> type:
    return REGISTRY.pick(names)


def default(options: Optional[MutableMapping[str, Any]] = None) -> type:
    return REGISTRY.default(options)


__all__ = [
    "BUILTIN_HANDLERS",
    "REGISTRY",
    "Registry",
    "Resolution",
    "class_from_string",
    "default",
    "get",
    "pick",
    "register",
    "underscore",
]
