# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Reporting adapter that forwards events to a reporting backend."""

import logging
import platform
from functools import partial
from typing import Any, Callable, Mapping, NoReturn, Sequence

from .backend import ReportingBackend
from .config import MAX_TAG_KEY_LENGTH, MAX_TAG_VALUE_LENGTH, BackendOptions, ReportingConfig
from .context import RequestContext, process_options
from .errors import (
    ConfigurationError,
    ReportingAdapterError,
    ReportingError,
    ValidationError,
    wrap_backend_error,
)
from .factory import create_backend
from .levels import Level, process_level

logger = logging.getLogger(__name__)

BackendFactory = Callable[[str | None, BackendOptions], ReportingBackend]


def check_tags(tags: Mapping[str, Any]) -> None:
    """Check that tags fit within Sentry's limits.

    Args:
        tags: Tags to check

    Raises:
        ConfigurationError: If a tag key or value is too long
    """
    for key, value in tags.items():
        if len(str(key)) > MAX_TAG_KEY_LENGTH:
            raise ConfigurationError(
                f"SentryClient does not allow tag keys that contain more than "
                f"{MAX_TAG_KEY_LENGTH} characters."
            )
        if len(str(value)) > MAX_TAG_VALUE_LENGTH:
            raise ConfigurationError(
                f"SentryClient does not allow tag values that contain more than "
                f"{MAX_TAG_VALUE_LENGTH} characters."
            )


class ReportingAdapter:
    """Forwards exceptions, messages, queries and breadcrumbs to Sentry.

    Events are only sent when the active environment is one of the enabled
    environments. Captured events are enriched with the request's user and
    company and with the configured extra variables. The id of every
    captured event is kept in ``logged_event_ids`` so it can be shown to the
    user, e.g. on an error page.

    Example:
        adapter = ReportingAdapter(ReportingConfig(dsn="https://...@sentry.io/1",
                                                   environment="production"))
        adapter.capture_exception(exc, {"extra": {"category": "http.500"}})
    """

    def __init__(
        self,
        config: ReportingConfig | None = None,
        backend_factory: BackendFactory | None = None,
    ):
        """Initialize the adapter and create the backend client.

        Args:
            config: Adapter configuration
            backend_factory: Callable creating the backend from (dsn, options).
                Defaults to the driver named by ``config.backend_type``.

        Raises:
            ConfigurationError: If tags are invalid or the client cannot be created
        """
        self.config = config or ReportingConfig()
        self._backend_factory = backend_factory or partial(create_backend, self.config.backend_type)
        self._logged_event_ids: list[Any] = []
        self._client = self._create_client()

    @property
    def client(self) -> ReportingBackend:
        """The backend client."""
        return self._client

    @property
    def logged_event_ids(self) -> list[Any]:
        """Ids of the events captured so far, in capture order."""
        return self._logged_event_ids

    @logged_event_ids.setter
    def logged_event_ids(self, event_ids: Sequence[Any]) -> None:
        self._logged_event_ids = list(event_ids)

    def default_tags(self) -> dict[str, str]:
        """Tags attached to every event before configured tags are applied."""
        tags = {
            "environment": self.config.environment,
            "python_version": platform.python_version(),
        }
        if self.config.options.site:
            tags["site"] = self.config.options.site
        return tags

    def _create_client(self) -> ReportingBackend:
        tags = {**self.default_tags(), **self.config.options.tags, **self.config.tags}
        options = self.config.options.with_tags(tags, environment=self.config.environment)
        try:
            check_tags(tags)
            return self._backend_factory(self.config.dsn, options)
        except Exception as e:
            self._raise_backend_error(ConfigurationError, "create client", e)

    def _raise_backend_error(
        self,
        error_cls: type[ReportingAdapterError],
        action: str,
        error: Exception,
    ) -> NoReturn:
        surfaced = wrap_backend_error(error_cls, action, error, self.config.debug, logger)
        if self.config.debug:
            raise surfaced from error
        raise surfaced from None

    def _record(self, kind: str, event_id: Any) -> Any:
        self._logged_event_ids.append(event_id)
        logger.info(f"{kind} logged to Sentry with event id: {event_id}")
        return event_id

    def is_environment_enabled(self) -> bool:
        """Return whether events are sent in the active environment."""
        return self.config.environment in self.config.enabled_environments

    def capture_exception(
        self,
        exception: BaseException,
        options: Mapping[str, Any] | None = None,
        logger_name: str = "",
        context: Mapping[str, Any] | None = None,
        request_context: RequestContext | None = None,
    ) -> Any:
        """Log an exception to Sentry.

        Args:
            exception: Exception to log
            options: Capture options (culprit, extra, user, level)
            logger_name: Name of the logger
            context: Exception context
            request_context: Current user, company and client IP

        Returns:
            Event id, or None if the environment is not enabled

        Raises:
            ReportingError: If logging the exception fails
        """
        if not self.is_environment_enabled():
            return None

        capture_options = dict(options or {})
        process_options(capture_options, self.config.extra_variables, request_context)
        process_level(exception, capture_options)
        try:
            event_id = self._client.capture_exception(exception, capture_options, logger_name, context)
        except Exception as e:
            self._raise_backend_error(ReportingError, "log exception", e)
        return self._record("Exception", event_id)

    def capture_message(
        self,
        message: str,
        params: Sequence[Any] = (),
        options: Mapping[str, Any] | None = None,
        include_stack: bool = False,
        context: Mapping[str, Any] | None = None,
        request_context: RequestContext | None = None,
    ) -> Any:
        """Log a message to Sentry.

        The length check runs before the environment check.

        Args:
            message: Message to log
            params: Message parameters
            options: Capture options (culprit, extra, user, level)
            include_stack: Whether to send the stack trace
            context: Message context
            request_context: Current user, company and client IP

        Returns:
            Event id, or None if the environment is not enabled

        Raises:
            ValidationError: If the message is longer than the message limit
            ReportingError: If logging the message fails
        """
        limit = self.config.options.message_limit
        if len(message) > limit:
            raise ValidationError(
                f"SentryClient cannot send messages that contain more than {limit} characters."
            )
        if not self.is_environment_enabled():
            return None

        capture_options = dict(options or {})
        process_options(capture_options, self.config.extra_variables, request_context)
        process_level(message, capture_options)
        try:
            event_id = self._client.capture_message(
                message, params, capture_options, include_stack, context
            )
        except Exception as e:
            self._raise_backend_error(ReportingError, "log message", e)
        return self._record("Message", event_id)

    def capture_query(
        self,
        query: str,
        level: Level | str = Level.INFO,
        engine: str = "",
    ) -> Any:
        """Log a query to Sentry.

        Args:
            query: Query to log
            level: Log level
            engine: Name of the SQL driver

        Returns:
            Event id, or None if the environment is not enabled

        Raises:
            ReportingError: If logging the query fails
        """
        if not self.is_environment_enabled():
            return None

        try:
            event_id = self._client.capture_query(query, level, engine)
        except Exception as e:
            self._raise_backend_error(ReportingError, "log query", e)
        return self._record("Query", event_id)

    def record_breadcrumb(
        self,
        message: str,
        data: Mapping[str, Any] | None = None,
        category: str = "",
        level: Level | str = Level.INFO,
    ) -> bool:
        """Record a breadcrumb. Breadcrumbs are recorded in every environment.

        Args:
            message: Description of the event, often a drop-in for a log message
            data: Metadata about the event
            category: Area the event took place in, such as "auth"
            level: Severity level

        Returns:
            True once the breadcrumb is recorded

        Raises:
            ReportingError: If recording the breadcrumb fails
        """
        try:
            self._client.record_breadcrumb({
                "message": message,
                "data": dict(data or {}),
                "category": category,
                "level": level,
            })
        except Exception as e:
            self._raise_backend_error(ReportingError, "log breadcrumb", e)
        return True

    def flush(self, timeout: float | None = None) -> None:
        """Wait for the backend to deliver pending events."""
        self._client.flush(timeout)
