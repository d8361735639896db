# SPDX-License-Identifier: MIT
# Copyright (c) 2025 sentry-reporting contributors

"""Tests for ReportingAdapter."""

import logging
import platform

import pytest

from sentry_reporting import (
    BackendOptions,
    ConfigurationError,
    Level,
    ReportingAdapter,
    ReportingConfig,
    ReportingError,
    RequestContext,
    UserContext,
    ValidationError,
    create_reporting_adapter,
)
from sentry_reporting.silent_backend import SilentBackend


class BackendFailure(Exception):
    """Backend error carrying a code."""

    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


class RecordingFactory:
    """Backend factory remembering what it was asked to build."""

    def __init__(self):
        self.calls = []

    def __call__(self, dsn, options):
        self.calls.append((dsn, options))
        return SilentBackend(dsn, options)


class TestInitialization:
    """Tests for adapter construction."""

    def test_default_tags(self, make_adapter):
        """Test that environment and Python version tags are set."""
        adapter = make_adapter()

        tags = adapter.client.options.tags
        assert tags["environment"] == "production"
        assert tags["python_version"] == platform.python_version()
        assert adapter.client.options.environment == "production"

    def test_caller_tags_override_defaults(self, make_adapter):
        """Test that configured tags win on key collision."""
        adapter = make_adapter(
            tags={"environment": "prod-eu", "team": "payments"},
            options=BackendOptions(tags={"team": "core", "site": "www"}),
        )

        tags = adapter.client.options.tags
        assert tags["environment"] == "prod-eu"
        assert tags["team"] == "payments"
        assert tags["site"] == "www"

    def test_site_option_becomes_tag(self, make_adapter):
        """Test that the site option is sent as a tag."""
        adapter = make_adapter(options=BackendOptions(site="shop"))

        assert adapter.client.options.tags["site"] == "shop"

    def test_backend_receives_dsn(self):
        """Test that the backend is built with the configured DSN."""
        factory = RecordingFactory()

        ReportingAdapter(ReportingConfig(dsn="https://key@sentry.example.com/1"), factory)

        assert len(factory.calls) == 1
        assert factory.calls[0][0] == "https://key@sentry.example.com/1"

    def test_long_tag_value_rejected(self):
        """Test that a 201 character tag value fails before the backend is built."""
        factory = RecordingFactory()
        config = ReportingConfig(environment="production", tags={"env": "x" * 201})

        with pytest.raises(ConfigurationError):
            ReportingAdapter(config, factory)

        assert factory.calls == []

    def test_long_tag_key_rejected(self):
        """Test that a 33 character tag key fails before the backend is built."""
        factory = RecordingFactory()
        config = ReportingConfig(tags={"k" * 33: "value"})

        with pytest.raises(ConfigurationError):
            ReportingAdapter(config, factory)

        assert factory.calls == []

    def test_tags_at_limits_accepted(self):
        """Test that tags exactly at the limits are accepted."""
        factory = RecordingFactory()

        ReportingAdapter(ReportingConfig(tags={"k" * 32: "v" * 200}), factory)

        assert len(factory.calls) == 1

    def test_construction_failure_debug(self):
        """Test that debug mode discloses the backend error."""
        def failing_factory(dsn, options):
            raise BackendFailure("bad dsn", 17)

        with pytest.raises(ConfigurationError) as exc_info:
            ReportingAdapter(ReportingConfig(debug=True), failing_factory)

        assert str(exc_info.value) == "SentryClient failed to create client: bad dsn"
        assert exc_info.value.code == 17
        assert isinstance(exc_info.value.__cause__, BackendFailure)

    def test_construction_failure_production(self, caplog):
        """Test that production mode logs the backend error and hides it."""
        def failing_factory(dsn, options):
            raise BackendFailure("bad dsn", 17)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ConfigurationError) as exc_info:
                ReportingAdapter(ReportingConfig(debug=False), failing_factory)

        assert str(exc_info.value) == "SentryClient failed to create client."
        assert exc_info.value.code == 0
        assert exc_info.value.__cause__ is None
        assert "bad dsn" in caplog.text

    def test_unknown_backend_type(self):
        """Test that an unknown backend type is a configuration error."""
        with pytest.raises(ConfigurationError):
            ReportingAdapter(ReportingConfig(backend_type="carrier-pigeon", debug=True))

    def test_create_reporting_adapter_from_env(self, monkeypatch):
        """Test building an adapter from environment variables."""
        monkeypatch.setenv("SENTRY_BACKEND", "silent")
        monkeypatch.setenv("SENTRY_ENVIRONMENT", "staging")

        adapter = create_reporting_adapter()

        assert isinstance(adapter.client, SilentBackend)
        assert adapter.is_environment_enabled()


class TestEnvironmentGating:
    """Tests for environment gating."""

    def test_enabled_environment(self, make_adapter):
        """Test that listed environments are enabled."""
        assert make_adapter(environment="staging").is_environment_enabled()

    def test_disabled_environment_skips_captures(self, make_adapter):
        """Test that captures are no-ops outside enabled environments."""
        adapter = make_adapter(environment="dev", enabled_environments=("production", "staging"))

        assert adapter.capture_exception(RuntimeError("boom")) is None
        assert adapter.capture_message("hello") is None
        assert adapter.capture_query("SELECT 1") is None
        assert adapter.logged_event_ids == []
        assert adapter.client.events == []

    def test_breadcrumbs_recorded_when_disabled(self, make_adapter):
        """Test that breadcrumbs are forwarded in every environment."""
        adapter = make_adapter(environment="dev")

        assert adapter.record_breadcrumb("clicked", {"button": "save"}, "ui", Level.DEBUG) is True

        assert adapter.client.breadcrumbs == [
            {"message": "clicked", "data": {"button": "save"}, "category": "ui", "level": Level.DEBUG}
        ]


class TestCaptureException:
    """Tests for capture_exception."""

    def test_returns_and_records_event_id(self, adapter, caplog):
        """Test that the event id is recorded and logged."""
        with caplog.at_level(logging.INFO, logger="sentry_reporting.adapter"):
            event_id = adapter.capture_exception(RuntimeError("boom"))

        assert event_id is not None
        assert adapter.logged_event_ids == [event_id]
        assert f"Exception logged to Sentry with event id: {event_id}" in caplog.text

    def test_options_enriched(self, make_adapter):
        """Test that user, extra and level are added before delegation."""
        adapter = make_adapter(extra_variables={"region": "eu", "build": "default"})
        context = RequestContext(user=UserContext(id=1, username="jdoe"), ip_address="10.0.0.1")

        adapter.capture_exception(
            RuntimeError("boom"),
            {"extra": {"build": "caller"}, "culprit": "views.checkout"},
            logger_name="orders",
            context={"order_id": 5},
            request_context=context,
        )

        event = adapter.client.get_events("exception")[0]
        assert event["options"]["user"]["username"] == "jdoe"
        assert event["options"]["user"]["ip_address"] == "10.0.0.1"
        assert event["options"]["extra"] == {"region": "eu", "build": "caller"}
        assert event["options"]["culprit"] == "views.checkout"
        assert event["options"]["level"] == Level.ERROR
        assert event["logger_name"] == "orders"
        assert event["context"] == {"order_id": 5}

    def test_caller_options_not_mutated(self, adapter):
        """Test that the caller's options mapping is left untouched."""
        options = {"culprit": "x"}

        adapter.capture_exception(RuntimeError("boom"), options)

        assert options == {"culprit": "x"}

    def test_backend_failure_debug(self, make_adapter):
        """Test that backend errors are disclosed in debug mode."""
        adapter = make_adapter(debug=True)
        adapter.client.fail_with = BackendFailure("connection refused", 111)

        with pytest.raises(ReportingError) as exc_info:
            adapter.capture_exception(RuntimeError("boom"))

        assert str(exc_info.value) == "SentryClient failed to log exception: connection refused"
        assert exc_info.value.code == 111
        assert adapter.logged_event_ids == []

    def test_backend_failure_production(self, make_adapter, caplog):
        """Test that backend errors are logged and hidden in production mode."""
        adapter = make_adapter(debug=False)
        adapter.client.fail_with = BackendFailure("connection refused", 111)

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ReportingError) as exc_info:
                adapter.capture_exception(RuntimeError("boom"))

        assert str(exc_info.value) == "SentryClient failed to log exception."
        assert "connection refused" not in str(exc_info.value)
        assert "connection refused" in caplog.text

    def test_failure_does_not_block_later_calls(self, adapter):
        """Test that a failed capture leaves the adapter usable."""
        adapter.client.fail_with = BackendFailure("timeout", 0)
        with pytest.raises(ReportingError):
            adapter.capture_exception(RuntimeError("first"))

        adapter.client.fail_with = None
        event_id = adapter.capture_exception(RuntimeError("second"))

        assert adapter.logged_event_ids == [event_id]


class TestCaptureMessage:
    """Tests for capture_message."""

    def test_enabled_environment_scenario(self, make_adapter):
        """Test a short message in production yields one event id."""
        adapter = make_adapter(environment="production", enabled_environments=("production",))

        event_id = adapter.capture_message("ok")

        assert event_id is not None
        assert len(adapter.logged_event_ids) == 1

    def test_params_and_stack_forwarded(self, adapter):
        """Test that params and the stack flag reach the backend."""
        adapter.capture_message("User %s failed", ["jdoe"], include_stack=True)

        event = adapter.client.get_events("message")[0]
        assert event["message"] == "User %s failed"
        assert event["params"] == ["jdoe"]
        assert event["include_stack"] is True
        assert event["options"]["level"] == Level.ERROR

    def test_explicit_level(self, adapter):
        """Test that extra.level sets the level of a message."""
        adapter.capture_message("Cache warmed", options={"extra": {"level": "info"}})

        assert adapter.client.get_events("message")[0]["options"]["level"] == "info"

    def test_too_long_message_rejected(self, make_adapter):
        """Test that long messages fail before reaching the backend."""
        adapter = make_adapter(options=BackendOptions(message_limit=10))

        with pytest.raises(ValidationError, match="more than 10 characters"):
            adapter.capture_message("x" * 11)

        assert adapter.client.events == []

    def test_too_long_message_rejected_when_disabled(self, make_adapter):
        """Test that the length check runs even in disabled environments."""
        adapter = make_adapter(environment="dev", options=BackendOptions(message_limit=10))

        with pytest.raises(ValidationError):
            adapter.capture_message("x" * 11)

    def test_message_at_limit_accepted(self, make_adapter):
        """Test that a message exactly at the limit is sent."""
        adapter = make_adapter(options=BackendOptions(message_limit=10))

        assert adapter.capture_message("x" * 10) is not None

    def test_logs_event_id(self, adapter, caplog):
        """Test the informational log line."""
        with caplog.at_level(logging.INFO, logger="sentry_reporting.adapter"):
            event_id = adapter.capture_message("hello")

        assert f"Message logged to Sentry with event id: {event_id}" in caplog.text

    def test_backend_failure(self, make_adapter):
        """Test that backend errors surface as ReportingError."""
        adapter = make_adapter(debug=True)
        adapter.client.fail_with = BackendFailure("rate limited", 429)

        with pytest.raises(ReportingError, match="failed to log message: rate limited"):
            adapter.capture_message("hello")


class TestCaptureQuery:
    """Tests for capture_query."""

    def test_query_forwarded_without_enrichment(self, make_adapter):
        """Test that queries are delegated as given."""
        adapter = make_adapter(extra_variables={"region": "eu"})

        event_id = adapter.capture_query("SELECT 1", Level.DEBUG, "postgresql")

        event = adapter.client.get_events("query")[0]
        assert event["query"] == "SELECT 1"
        assert event["level"] == Level.DEBUG
        assert event["engine"] == "postgresql"
        assert "options" not in event
        assert adapter.logged_event_ids == [event_id]

    def test_backend_failure_production(self, make_adapter):
        """Test the generic error for failed queries."""
        adapter = make_adapter()
        adapter.client.fail_with = BackendFailure("boom", 1)

        with pytest.raises(ReportingError, match=r"^SentryClient failed to log query\.$"):
            adapter.capture_query("SELECT 1")


class TestEventIds:
    """Tests for the logged event id list."""

    def test_ids_in_capture_order(self, adapter):
        """Test that ids accumulate in capture order."""
        first = adapter.capture_exception(RuntimeError("one"))
        second = adapter.capture_message("two")
        third = adapter.capture_query("SELECT 3")

        assert adapter.logged_event_ids == [first, second, third]

    def test_reset(self, adapter):
        """Test replacing the list at a request boundary."""
        adapter.capture_message("one")

        adapter.logged_event_ids = []

        assert adapter.logged_event_ids == []


class TestRecordBreadcrumb:
    """Tests for record_breadcrumb."""

    def test_defaults(self, adapter):
        """Test default breadcrumb fields."""
        adapter.record_breadcrumb("Signed in")

        assert adapter.client.breadcrumbs == [
            {"message": "Signed in", "data": {}, "category": "", "level": Level.INFO}
        ]

    def test_backend_failure_debug(self, make_adapter):
        """Test breadcrumb failures in debug mode."""
        adapter = make_adapter(debug=True)
        adapter.client.fail_with = BackendFailure("buffer full", 3)

        with pytest.raises(ReportingError) as exc_info:
            adapter.record_breadcrumb("Signed in")

        assert str(exc_info.value) == "SentryClient failed to log breadcrumb: buffer full"
        assert exc_info.value.code == 3

    def test_backend_failure_production(self, make_adapter):
        """Test breadcrumb failures in production mode."""
        adapter = make_adapter()
        adapter.client.fail_with = BackendFailure("buffer full", 3)

        with pytest.raises(ReportingError, match=r"^SentryClient failed to log breadcrumb\.$"):
            adapter.record_breadcrumb("Signed in")
