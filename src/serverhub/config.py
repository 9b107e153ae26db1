from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from serverhub.handler import DEFAULT_ENV_VAR, DEFAULT_NAMESPACE, DEFAULT_PREFERENCE

logger = logging.getLogger(__name__)


class SettingsModel(BaseModel):
    """
    Settings files accept both camelCase and snake_case keys; unknown keys fail.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="forbid",
    )


class HandlerSettings(SettingsModel):
    """
    Controls where handlers are looked up and which one runs by default.
    """

    namespace: str = DEFAULT_NAMESPACE
    preference: List[str] = Field(default_factory=lambda: list(DEFAULT_PREFERENCE))
    env_var: str = DEFAULT_ENV_VAR
    handlers: Dict[str, str] = Field(default_factory=dict)
    log_level: str = "INFO"


def load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    resolved = Path(path).resolve()
    with resolved.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at top level of {resolved}, got {type(data).__name__}.")
    logger.debug("YAML loaded | path=%s", resolved)
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> HandlerSettings:
    if path is None:
        return HandlerSettings()
    settings = HandlerSettings(**load_yaml(path))
    logger.debug("Handler settings loaded | path=%s | handlers=%s", path, sorted(settings.handlers))
    return settings


__all__ = ["SettingsModel", "HandlerSettings", "load_yaml", "load_settings"]
