# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Configuration models for the reporting adapter."""

import os
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Mapping

# Sentry limits
MAX_MESSAGE_LENGTH = 999999999
MAX_TAG_KEY_LENGTH = 32
MAX_TAG_VALUE_LENGTH = 200
MAX_CULPRIT_LENGTH = 200

DEFAULT_ENVIRONMENT = "dev"
DEFAULT_ENABLED_ENVIRONMENTS = ("production", "staging")

EventProcessor = Callable[[dict[str, Any], dict[str, Any]], dict[str, Any] | None]


@dataclass(frozen=True)
class BackendOptions:
    """Options handed to the reporting backend client at construction time.

    Attributes:
        logger: Logger name attached to every event
        environment: Environment name reported by the client
        attach_stacktrace: Whether to attach stack traces to message events
        server_name: Name of the server sending events
        release: Release identifier attached to events
        site: Name of the installation, sent as the ``site`` tag
        tags: Key/value pairs that describe every event
        timeout: Seconds the client may spend delivering pending events
        exclude: Class names of exceptions the client ignores
        processors: Event processors run before an event is sent
        message_limit: Maximum length of text values in an event
        sample_rate: Fraction of error events sent
        max_breadcrumbs: Number of breadcrumbs buffered by the client
        extra: Additional client keyword arguments passed through unchanged
    """
    logger: str = "python"
    environment: str | None = None
    attach_stacktrace: bool = False
    server_name: str | None = None
    release: str | None = None
    site: str | None = None
    tags: Mapping[str, str] = field(default_factory=dict)
    timeout: float | None = None
    exclude: tuple[str, ...] = ()
    processors: tuple[EventProcessor, ...] = ()
    message_limit: int = MAX_MESSAGE_LENGTH
    sample_rate: float = 1.0
    max_breadcrumbs: int | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def with_tags(self, tags: Mapping[str, str], environment: str | None = None) -> "BackendOptions":
        """Return a copy of these options carrying the given tags and environment."""
        return replace(self, tags=dict(tags), environment=environment or self.environment)


@dataclass(frozen=True)
class ReportingConfig:
    """Configuration for a ReportingAdapter.

    Attributes:
        dsn: Sentry DSN used to connect to the service
        environment: Name of the active environment
        enabled_environments: Environments in which events are sent
        tags: Tags attached to every event; override the defaults
        extra_variables: Extra data merged into every captured event
        options: Backend client options
        debug: Include backend error details in surfaced errors
        backend_type: Backend driver ("sentry", "console", "silent")
    """
    dsn: str | None = None
    environment: str = DEFAULT_ENVIRONMENT
    enabled_environments: tuple[str, ...] = DEFAULT_ENABLED_ENVIRONMENTS
    tags: Mapping[str, str] = field(default_factory=dict)
    extra_variables: Mapping[str, Any] = field(default_factory=dict)
    options: BackendOptions = field(default_factory=BackendOptions)
    debug: bool = False
    backend_type: str = "sentry"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReportingConfig":
        """Build a configuration from SENTRY_* environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ReportingConfig instance

        Raises:
            ValueError: If SENTRY_TAGS contains an entry without '='
        """
        env = environ if environ is not None else os.environ

        enabled = env.get("SENTRY_ENABLED_ENVIRONMENTS")
        enabled_environments = (
            _parse_list(enabled) if enabled is not None else DEFAULT_ENABLED_ENVIRONMENTS
        )

        options = BackendOptions(
            logger=env.get("SENTRY_LOGGER") or "python",
            server_name=env.get("SENTRY_SERVER_NAME") or None,
            release=env.get("SENTRY_RELEASE") or None,
            timeout=_parse_float(env.get("SENTRY_TIMEOUT")),
        )

        return cls(
            dsn=env.get("SENTRY_DSN") or None,
            environment=env.get("SENTRY_ENVIRONMENT") or DEFAULT_ENVIRONMENT,
            enabled_environments=enabled_environments,
            tags=_parse_tags(env.get("SENTRY_TAGS", "")),
            options=options,
            debug=_parse_bool(env.get("SENTRY_DEBUG"), default=False),
            backend_type=(env.get("SENTRY_BACKEND") or "sentry").lower(),
        )


def _parse_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _parse_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default

    value_lower = value.lower()
    if value_lower in ("true", "1", "yes", "on"):
        return True
    if value_lower in ("false", "0", "no", "off"):
        return False
    return default


def _parse_float(value: str | None) -> float | None:
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _parse_tags(value: str) -> dict[str, str]:
    tags: dict[str, str] = {}
    for item in _parse_list(value):
        if "=" not in item:
            raise ValueError(f"Invalid SENTRY_TAGS entry: {item!r}. Expected key=value")
        key, tag_value = item.split("=", 1)
        tags[key.strip()] = tag_value.strip()
    return tags
