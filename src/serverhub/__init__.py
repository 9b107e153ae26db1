"""
WSGI server handler registry.
"""

from .errors import HandlerError, HandlerLoadError, HandlerNameError, ResolutionError
from .handler import Registry, default, get, pick, register

__version__ = "0.1.0"

__all__ = [
    "HandlerError",
    "HandlerLoadError",
    "HandlerNameError",
    "ResolutionError",
    "Registry",
    "default",
    "get",
    "pick",
    "register",
]
