"""Naming conventions and dotted-path class lookup for handlers."""

from __future__ import annotations

import importlib
import inspect
import re
from typing import Any

from serverhub.errors import HandlerNameError

_LEADING_CAPS = re.compile(r"^[A-Z]+")
_INNER_CAPS = re.compile(r"[A-Z]+[^A-Z]")


def underscore(string: str) -> str:
    """
    Convert a class-style name into the module name it conventionally lives in.

        Foo       -> foo
        FooBar    -> foo_bar
        FooBarBaz -> foo_bar_baz
        WEBrick   -> webrick
    """
    string = _LEADING_CAPS.sub(lambda match: match.group(0).lower(), string)
    return _INNER_CAPS.sub(r"_\g<0>", string).lower()


def _import_segment(module_name: str) -> Any:
    try:
        return importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        # Only a miss on this exact module means the name is unknown; a missing
        # dependency inside an existing module is a load failure for the caller.
        if exc.name == module_name:
            raise HandlerNameError(f"No module named '{module_name}'.") from exc
        raise


def class_from_string(path: str) -> type:
    """Resolve a dotted path such as ``serverhub.handler.cgi.CGI`` to a class."""

    parts = path.split(".")
    if not all(parts):
        raise HandlerNameError(f"Invalid handler identifier: '{path}'.")

    obj = _import_segment(parts[0])
    for index, part in enumerate(parts[1:], start=1):
        if hasattr(obj, part):
            obj = getattr(obj, part)
        elif inspect.ismodule(obj):
            obj = _import_segment(".".join(parts[: index + 1]))
        else:
            raise HandlerNameError(f"'{'.'.join(parts[:index])}' has no attribute '{part}'.")

    if not inspect.isclass(obj):
        raise HandlerNameError(f"'{path}' is not a class.")
    return obj


__all__ = ["underscore", "class_from_string"]
