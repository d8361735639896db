# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Shared fixtures for reporting adapter tests."""

import pytest

from sentry_reporting import ReportingAdapter, ReportingConfig


@pytest.fixture
def make_adapter():
    """Build an adapter backed by the in-memory silent backend."""

    def _make(**config_kwargs) -> ReportingAdapter:
        config_kwargs.setdefault("environment", "production")
        config_kwargs.setdefault("backend_type", "silent")
        return ReportingAdapter(ReportingConfig(**config_kwargs))

    return _make


@pytest.fixture
def adapter(make_adapter) -> ReportingAdapter:
    """Adapter in an enabled environment."""
    return make_adapter()
