# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Factory functions for creating reporting backends."""

from .backend import ReportingBackend
from .config import BackendOptions


def _build_sentry(dsn: str | None, options: BackendOptions) -> ReportingBackend:
    from .sentry_backend import SentryBackend

    return SentryBackend.from_options(dsn, options)


def _build_console(dsn: str | None, options: BackendOptions) -> ReportingBackend:
    from .console_backend import ConsoleBackend

    return ConsoleBackend.from_options(dsn, options)


def _build_silent(dsn: str | None, options: BackendOptions) -> ReportingBackend:
    from .silent_backend import SilentBackend

    return SilentBackend.from_options(dsn, options)


_DRIVERS = {
    "sentry": _build_sentry,
    "console": _build_console,
    "silent": _build_silent,
}


def create_backend(
    backend_type: str,
    dsn: str | None = None,
    options: BackendOptions | None = None,
) -> ReportingBackend:
    """Create a reporting backend based on type.

    Args:
        backend_type: Type of backend ("sentry", "console", "silent")
        dsn: Sentry DSN (used by the sentry backend)
        options: Backend options

    Returns:
        ReportingBackend instance

    Raises:
        ValueError: If backend_type is unknown
    """
    driver_type = str(backend_type).lower()
    try:
        factory = _DRIVERS[driver_type]
    except KeyError as exc:
        supported = ", ".join(sorted(_DRIVERS.keys()))
        raise ValueError(
            f"Unknown backend type: {backend_type}. Supported backends: {supported}"
        ) from exc
    return factory(dsn, options or BackendOptions())
