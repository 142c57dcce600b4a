"""
Configuration for notifyval registries.

A ``Settings`` instance is attached to every ``Registry``; observables read
delimiters and defaults from the registry they were constructed against.
"""

import logging
import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Mapping, Optional, Union

from .errors import ConfigurationError

ENV_PREFIX = "NOTIFYVAL_"

PACKAGE_LOGGER = "notifyval"


class ArrayMode(Enum):
    """How an array reports changes to its elements."""

    #: Each element is registered and notifies on its own path (``a.0``)
    PER_ELEMENT = "per_element"
    #: Only the array is registered; any element change emits the whole array
    WHOLE_ARRAY = "whole_array"

    @classmethod
    def parse(cls, value: Union[str, "ArrayMode"]) -> "ArrayMode":
        if isinstance(value, ArrayMode):
            return value
        try:
            return cls(value.strip().lower().replace("-", "_"))
        except ValueError:
            raise ConfigurationError(f"Unknown array mode: {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """Tunable behavior of a registry and the observables attached to it."""

    array_delimiter: str = ","
    path_separator: str = "."
    default_array_mode: ArrayMode = ArrayMode.PER_ELEMENT
    console_format: str = "{path} updated, new value: {value}"

    def __post_init__(self) -> None:
        if not self.array_delimiter:
            raise ConfigurationError("array_delimiter must not be empty")
        if not self.path_separator:
            raise ConfigurationError("path_separator must not be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``NOTIFYVAL_*`` environment variables."""
        environ = os.environ if environ is None else environ
        settings = cls()
        overrides = {}

        if f"{ENV_PREFIX}ARRAY_DELIMITER" in environ:
            overrides["array_delimiter"] = environ[f"{ENV_PREFIX}ARRAY_DELIMITER"]
        if f"{ENV_PREFIX}PATH_SEPARATOR" in environ:
            overrides["path_separator"] = environ[f"{ENV_PREFIX}PATH_SEPARATOR"]
        if f"{ENV_PREFIX}ARRAY_MODE" in environ:
            overrides["default_array_mode"] = ArrayMode.parse(
                environ[f"{ENV_PREFIX}ARRAY_MODE"]
            )

        return replace(settings, **overrides)


def configure_logging(
    level: Union[int, str, None] = None, fmt: Optional[str] = None
) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    The library never touches the root logger; applications that want to see
    registration and dispatch debug output call this once.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    if level is None:
        level = os.environ.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING")
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

    if not any(getattr(h, "_notifyval", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(fmt or "%(asctime)s %(name)s %(levelname)s: %(message)s")
        )
        handler._notifyval = True
        logger.addHandler(handler)
    return logger
