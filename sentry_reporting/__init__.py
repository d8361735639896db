# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Sentry reporting adapter.

Forwards exceptions, messages, queries and breadcrumbs from a web
application to Sentry, enriching every event with user and company context
and environment tags.

Example:
    >>> from sentry_reporting import ReportingConfig, create_reporting_adapter
    >>>
    >>> adapter = create_reporting_adapter(
    ...     ReportingConfig(dsn="https://key@sentry.example.com/1", environment="production")
    ... )
    >>> adapter.record_breadcrumb("User signed in", category="auth")
    >>> adapter.capture_message("Nightly import finished")
"""

from .adapter import ReportingAdapter, check_tags
from .backend import ReportingBackend
from .config import (
    MAX_CULPRIT_LENGTH,
    MAX_MESSAGE_LENGTH,
    MAX_TAG_KEY_LENGTH,
    MAX_TAG_VALUE_LENGTH,
    BackendOptions,
    ReportingConfig,
)
from .context import CompanyContext, RequestContext, UserContext, merge_options, process_options
from .errors import ConfigurationError, ReportingAdapterError, ReportingError, ValidationError
from .factory import create_backend
from .levels import Level, process_level

__version__ = "0.1.0"


def create_reporting_adapter(config: ReportingConfig | None = None) -> ReportingAdapter:
    """Create a reporting adapter from configuration.

    Args:
        config: Adapter configuration. Defaults to ``ReportingConfig.from_env()``.

    Returns:
        ReportingAdapter instance

    Raises:
        ConfigurationError: If the backend client cannot be created
    """
    return ReportingAdapter(config or ReportingConfig.from_env())


__all__ = [
    # Version
    "__version__",
    # Adapter
    "ReportingAdapter",
    "create_reporting_adapter",
    "check_tags",
    # Configuration
    "BackendOptions",
    "ReportingConfig",
    "MAX_CULPRIT_LENGTH",
    "MAX_MESSAGE_LENGTH",
    "MAX_TAG_KEY_LENGTH",
    "MAX_TAG_VALUE_LENGTH",
    # Context
    "CompanyContext",
    "RequestContext",
    "UserContext",
    "merge_options",
    "process_options",
    # Levels
    "Level",
    "process_level",
    # Backends
    "ReportingBackend",
    "create_backend",
    # Errors
    "ConfigurationError",
    "ReportingAdapterError",
    "ReportingError",
    "ValidationError",
]
