# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Silent reporting backend for testing."""

import uuid
from typing import Any, Mapping, Sequence

from .backend import ReportingBackend
from .config import BackendOptions
from .levels import Level


class SilentBackend(ReportingBackend):
    """Backend that stores events in memory.

    This implementation is useful for unit tests where you want to verify
    what the adapter sends without producing network traffic.

    Attributes:
        events: Captured events in capture order
        breadcrumbs: Recorded breadcrumbs in record order
        fail_with: When set, every call raises this exception
    """

    def __init__(self, dsn: str | None = None, options: BackendOptions | None = None):
        self.dsn = dsn
        self.options = options or BackendOptions()
        self.events: list[dict[str, Any]] = []
        self.breadcrumbs: list[dict[str, Any]] = []
        self.fail_with: Exception | None = None

    @classmethod
    def from_options(cls, dsn: str | None, options: BackendOptions) -> "SilentBackend":
        return cls(dsn=dsn, options=options)

    def _store(self, kind: str, **data: Any) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        event_id = uuid.uuid4().hex
        self.events.append({"event_id": event_id, "kind": kind, **data})
        return event_id

    def capture_exception(
        self,
        exception: BaseException,
        options: Mapping[str, Any],
        logger_name: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        return self._store(
            "exception",
            exception=exception,
            options=dict(options),
            logger_name=logger_name,
            context=context,
        )

    def capture_message(
        self,
        message: str,
        params: Sequence[Any] = (),
        options: Mapping[str, Any] | None = None,
        include_stack: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        return self._store(
            "message",
            message=message,
            params=list(params),
            options=dict(options or {}),
            include_stack=include_stack,
            context=context,
        )

    def capture_query(
        self,
        query: str,
        level: Level | str = Level.INFO,
        engine: str = "",
    ) -> str | None:
        return self._store("query", query=query, level=level, engine=engine)

    def record_breadcrumb(self, breadcrumb: Mapping[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.breadcrumbs.append(dict(breadcrumb))

    def get_events(self, kind: str | None = None) -> list[dict[str, Any]]:
        """Get captured events, optionally filtered by kind.

        Args:
            kind: Optional kind to filter by ("exception", "message", "query")

        Returns:
            List of captured event dictionaries
        """
        if kind:
            return [e for e in self.events if e["kind"] == kind]
        return self.events

    def clear(self) -> None:
        """Clear all stored events and breadcrumbs."""
        self.events.clear()
        self.breadcrumbs.clear()
