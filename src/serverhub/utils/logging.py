import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_level(level: Optional[str] = None) -> int:
    """Pick the effective level: SERVERHUB_LOG_LEVEL wins over ``level``; unknown names mean INFO."""
    name = (os.getenv("SERVERHUB_LOG_LEVEL") or level or "INFO").upper()
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[str] = "INFO") -> int:
    """
    Configure root logging for the command line and return the level in effect.

    SERVERHUB_LOG_FORMAT replaces the default pipe-delimited format.
    """
    resolved = resolve_level(level)
    logging.basicConfig(level=resolved, format=os.getenv("SERVERHUB_LOG_FORMAT") or LOG_FORMAT)
    logging.getLogger("serverhub").setLevel(resolved)
    return resolved
