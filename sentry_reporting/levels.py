# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Event severity levels and derivation of a level from an event subject."""

from enum import Enum
from typing import Any, MutableMapping


class Level(str, Enum):
    """Severity levels accepted by the adapter."""
    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"

    @property
    def sentry_level(self) -> str:
        """Level name as understood by sentry-sdk."""
        return "warning" if self is Level.WARN else self.value


_STATUS_LEVELS = {
    404: Level.WARN,
    500: Level.FATAL,
}


def _numeric_status(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return int(number) if number.is_integer() else None
    return None


def status_code_of(subject: Any, options: MutableMapping[str, Any]) -> Any:
    """Find the status code for an event.

    Looks at ``status_code`` (or ``statusCode``) on the subject first, then at
    the last dot-separated segment of ``options["extra"]["category"]``.
    """
    for attribute in ("status_code", "statusCode"):
        value = getattr(subject, attribute, None)
        if value is not None:
            return value

    extra = options.get("extra") or {}
    category = extra.get("category")
    if category:
        return str(category).split(".")[-1]
    return None


def process_level(subject: Any, options: MutableMapping[str, Any]) -> Level | str:
    """Derive the event level and store it in ``options["level"]``.

    A numeric status code decides the level: 404 is a warning, 500 is fatal,
    anything else is an error. Without a numeric status code an explicit
    ``options["extra"]["level"]`` is used as given.

    Args:
        subject: Exception or message being captured
        options: Capture options, updated in place

    Returns:
        The derived level
    """
    raw_status = status_code_of(subject, options)
    status = _numeric_status(raw_status)
    extra = options.get("extra") or {}

    level: Level | str
    if status is None and extra.get("level") is not None:
        level = extra["level"]
    else:
        level = _STATUS_LEVELS.get(status, Level.ERROR)

    options["level"] = level
    return level


def coerce_level(level: Level | str | None, default: Level = Level.ERROR) -> Level:
    """Convert a level name to a Level, mapping unknown names to the default."""
    if isinstance(level, Level):
        return level
    if level is None:
        return default
    name = str(level).lower()
    if name == "warning":
        return Level.WARN
    if name == "critical":
        return Level.FATAL
    try:
        return Level(name)
    except ValueError:
        return default
