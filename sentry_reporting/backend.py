# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Abstract reporting backend interface."""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from .config import BackendOptions
from .levels import Level


class ReportingBackend(ABC):
    """Abstract base class for the client that delivers events.

    The adapter validates and enriches every call before handing it to a
    backend. Backends own serialization and transport and return the id of
    each captured event.
    """

    @classmethod
    @abstractmethod
    def from_options(cls, dsn: str | None, options: BackendOptions) -> "ReportingBackend":
        """Create a backend client.

        Args:
            dsn: Sentry DSN
            options: Backend options, including the merged tags

        Returns:
            Backend instance
        """
        pass

    @abstractmethod
    def capture_exception(
        self,
        exception: BaseException,
        options: Mapping[str, Any],
        logger_name: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Capture an exception.

        Args:
            exception: The exception to capture
            options: Enriched capture options (culprit, extra, user, level)
            logger_name: Logger name for the event (defaults to the configured one)
            context: Additional exception context

        Returns:
            Event id
        """
        pass

    @abstractmethod
    def capture_message(
        self,
        message: str,
        params: Sequence[Any] = (),
        options: Mapping[str, Any] | None = None,
        include_stack: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        """Capture a message.

        Args:
            message: Message, optionally with %-style placeholders
            params: Values for the placeholders
            options: Enriched capture options
            include_stack: Whether to attach the current stack trace
            context: Additional message context

        Returns:
            Event id
        """
        pass

    @abstractmethod
    def capture_query(
        self,
        query: str,
        level: Level | str = Level.INFO,
        engine: str = "",
    ) -> str | None:
        """Capture a database query.

        Args:
            query: The query text
            level: Severity level
            engine: Name of the database driver

        Returns:
            Event id
        """
        pass

    @abstractmethod
    def record_breadcrumb(self, breadcrumb: Mapping[str, Any]) -> None:
        """Record a breadcrumb.

        Args:
            breadcrumb: Mapping with message, data, category and level
        """
        pass

    def flush(self, timeout: float | None = None) -> None:
        """Wait for pending events to be delivered."""
        pass
