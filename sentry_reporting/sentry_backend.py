# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Sentry backend implementation built on sentry-sdk."""

import logging
from typing import Any, Mapping, Sequence

try:
    import sentry_sdk
    from sentry_sdk.utils import current_stacktrace, event_from_exception
except ImportError as exc:
    raise ImportError(
        "sentry-sdk is not installed. "
        "Install it with: pip install sentry-sdk"
    ) from exc

from .backend import ReportingBackend
from .config import BackendOptions
from .levels import Level, coerce_level

logger = logging.getLogger(__name__)


class SentryBackend(ReportingBackend):
    """Backend that sends events to Sentry.

    The SDK is initialized once when the backend is created. Every event is
    sent with the configured tags plus the level, user and extra data of the
    capture options.

    Example:
        backend = SentryBackend(dsn="https://...@sentry.io/...")
        event_id = backend.capture_exception(exc, {"level": Level.ERROR})
    """

    def __init__(self, dsn: str | None = None, options: BackendOptions | None = None):
        """Initialize Sentry backend.

        Args:
            dsn: Sentry DSN (Data Source Name) for the project
            options: Backend options; tags are attached to every event
        """
        self.dsn = dsn
        self.options = options or BackendOptions()
        self.tags = dict(self.options.tags)
        sentry_sdk.init(dsn=dsn, **self.client_options())
        logger.debug(f"Sentry client initialized (environment: {self.options.environment})")

    @classmethod
    def from_options(cls, dsn: str | None, options: BackendOptions) -> "SentryBackend":
        return cls(dsn=dsn, options=options)

    def client_options(self) -> dict[str, Any]:
        """Translate backend options into sentry-sdk client keyword arguments."""
        options = self.options
        kwargs: dict[str, Any] = {
            "environment": options.environment,
            "release": options.release,
            "server_name": options.server_name,
            "attach_stacktrace": options.attach_stacktrace,
            "sample_rate": options.sample_rate,
            "max_value_length": options.message_limit,
            "ignore_errors": list(options.exclude),
            # Events only reach Sentry through the adapter
            "default_integrations": False,
            "auto_enabling_integrations": False,
        }
        if options.timeout is not None:
            kwargs["shutdown_timeout"] = options.timeout
        if options.max_breadcrumbs is not None:
            kwargs["max_breadcrumbs"] = options.max_breadcrumbs
        if options.processors:
            kwargs["before_send"] = self._run_processors
        kwargs.update(options.extra)
        return kwargs

    def _run_processors(self, event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
        for processor in self.options.processors:
            event = processor(event, hint)
            if event is None:
                return None
        return event

    def _scope_kwargs(
        self,
        options: Mapping[str, Any] | None,
        context: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        options = options or {}
        kwargs: dict[str, Any] = {
            "level": coerce_level(options.get("level")).sentry_level,
            "tags": dict(self.tags),
        }
        if options.get("user"):
            kwargs["user"] = dict(options["user"])
        if options.get("extra"):
            kwargs["extras"] = dict(options["extra"])
        if context:
            kwargs["contexts"] = {"context": dict(context)}
        return kwargs

    def capture_exception(
        self,
        exception: BaseException,
        options: Mapping[str, Any],
        logger_name: str = "",
        context: Mapping[str, Any] | None = None,
    ) -> str | None:
        client_options = sentry_sdk.get_client().options
        event, hint = event_from_exception(exception, client_options=client_options)
        event["logger"] = logger_name or self.options.logger
        if options.get("culprit"):
            event["transaction"] = options["culprit"]
        return sentry_sdk.capture_event(event, hint, **self._scope_kwargs(options, context))

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
        event: dict[str, Any] = {
            "message": formatted,
            "logger": self.options.logger,
        }
        if params:
            event["logentry"] = {"message": message, "params": list(params)}
        if options.get("culprit"):
            event["transaction"] = options["culprit"]
        if include_stack:
            event["threads"] = {
                "values": [{"stacktrace": current_stacktrace(), "crashed": False, "current": True}]
            }
        return sentry_sdk.capture_event(event, **self._scope_kwargs(options, context))

    def capture_query(
        self,
        query: str,
        level: Level | str = Level.INFO,
        engine: str = "",
    ) -> str | None:
        query_context: dict[str, Any] = {"query": query}
        if engine:
            query_context["engine"] = engine
        event: dict[str, Any] = {
            "message": query,
            "logger": self.options.logger,
        }
        return sentry_sdk.capture_event(
            event,
            level=coerce_level(level, default=Level.INFO).sentry_level,
            tags=dict(self.tags),
            contexts={"query": query_context},
        )

    def record_breadcrumb(self, breadcrumb: Mapping[str, Any]) -> None:
        crumb = {
            "message": breadcrumb.get("message"),
            "data": dict(breadcrumb.get("data") or {}),
            "level": coerce_level(breadcrumb.get("level"), default=Level.INFO).sentry_level,
        }
        if breadcrumb.get("category"):
            crumb["category"] = breadcrumb["category"]
        sentry_sdk.add_breadcrumb(crumb=crumb)

    def flush(self, timeout: float | None = None) -> None:
        sentry_sdk.flush(timeout=timeout)
