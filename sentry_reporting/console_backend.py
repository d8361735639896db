# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Console-based reporting backend."""

import logging
import traceback
import uuid
from typing import Any, Mapping, Sequence

from .backend import ReportingBackend
from .config import BackendOptions
from .levels import Level, coerce_level

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
    Level.FATAL: logging.CRITICAL,
}


class ConsoleBackend(ReportingBackend):
    """Backend that writes events to Python's logging system.

    Useful in development, where events should be visible locally instead of
    being sent to Sentry.
    """

    def __init__(self, options: BackendOptions | None = None, logger_name: str | None = None):
        """Initialize console backend.

        Args:
            options: Backend options; tags are included in every line
            logger_name: Optional logger name to use (defaults to module logger)
        """
        self.options = options or BackendOptions()
        self.logger = logging.getLogger(logger_name) if logger_name else logger

    @classmethod
    def from_options(cls, dsn: str | None, options: BackendOptions) -> "ConsoleBackend":
        return cls(options=options)

    def _emit(self, level: Level | str | None, text: str, details: Mapping[str, Any] | None = None) -> str:
        event_id = uuid.uuid4().hex
        line = f"[{event_id}] {text}"
        fields = {**self.options.tags, **(details or {})}
        if fields:
            line += " | " + ", ".join(f"{k}={v}" for k, v in fields.items())
        self.logger.log(_LOG_LEVELS[coerce_level(level)], line)
        return event_id

    def capture_exception(
        self,
        exception: BaseException,
        options: Mapping[str, Any],
        logger_name: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        error_type = type(exception).__name__
        event_id = self._emit(
            options.get("level"),
            f"Exception occurred: {error_type}: {exception}",
            {**(options.get("extra") or {}), **(context or {})},
        )
        stack_trace = "".join(
            traceback.format_exception(type(exception), exception, exception.__traceback__)
        )
        self.logger.debug(f"Stack trace:\n{stack_trace}")
        return event_id

    def capture_message(
        self,
        message: str,
        params: Sequence[Any] = (),
        options: Mapping[str, Any] | None = None,
        include_stack: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        options = options or {}
        formatted = message % tuple(params) if params else message
        event_id = self._emit(
            options.get("level"),
            formatted,
            {**(options.get("extra") or {}), **(context or {})},
        )
        if include_stack:
            self.logger.debug("Stack trace:\n" + "".join(traceback.format_stack()))
        return event_id

    def capture_query(
        self,
        query: str,
        level: Level | str = Level.INFO,
        engine: str = "",
    ) -> str | None:
        details = {"engine": engine} if engine else None
        return self._emit(coerce_level(level, default=Level.INFO), f"Query: {query}", details)

    def record_breadcrumb(self, breadcrumb: Mapping[str, Any]) -> None:
        category = breadcrumb.get("category") or "default"
        self.logger.debug(f"Breadcrumb [{category}] {breadcrumb.get('message')}")
