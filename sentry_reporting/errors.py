# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Exceptions raised by the reporting adapter."""

import logging


class ReportingAdapterError(Exception):
    """Base class for reporting adapter errors.

    Attributes:
        code: Numeric error code taken from the backend error when disclosed
    """

    def __init__(self, message: str, code: int = 0):
        super().__init__(message)
        self.code = code


class ConfigurationError(ReportingAdapterError):
    """Raised when the backend client cannot be created or tags are invalid."""


class ValidationError(ReportingAdapterError):
    """Raised when caller input exceeds a Sentry limit."""


class ReportingError(ReportingAdapterError):
    """Raised when the backend fails to record an event or breadcrumb."""


def error_code(error: BaseException) -> int:
    """Return the integer code carried by an error, or 0."""
    for attribute in ("code", "errno"):
        value = getattr(error, attribute, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return 0


def wrap_backend_error(
    error_cls: type[ReportingAdapterError],
    action: str,
    error: Exception,
    debug: bool,
    logger: logging.Logger,
) -> ReportingAdapterError:
    """Build the error surfaced to the caller for a backend failure.

    In debug mode the backend message and code are disclosed. Otherwise the
    backend message is only written to the log and a generic error is returned.

    Args:
        error_cls: Adapter error class to instantiate
        action: What the adapter was doing, e.g. "log exception"
        error: The backend error
        debug: Whether to disclose backend details
        logger: Logger receiving the backend message in production mode

    Returns:
        Error instance for the caller to raise
    """
    if debug:
        return error_cls(f"SentryClient failed to {action}: {error}", error_code(error))

    logger.error(str(error))
    return error_cls(f"SentryClient failed to {action}.")
