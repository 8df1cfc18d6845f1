"""
Basic import tests to verify the core functionality.
"""


def test_analytics_package_imports():
    """Test that the analytics package exposes its public API."""
    from app.analytics import (
        AggregationEngine,
        EventRecorder,
        SessionStore,
        SessionNotFound,
        StorageUnavailable,
        ValidationError,
    )

    assert callable(AggregationEngine)
    assert callable(EventRecorder)
    assert callable(SessionStore)
    assert issubclass(SessionNotFound, Exception)
    assert issubclass(StorageUnavailable, Exception)
    assert issubclass(ValidationError, Exception)


def test_tracker_client_exported():
    """Test that the tracker client is part of the package interface."""
    import app.analytics as analytics

    assert "AnalyticsClient" in analytics.__all__
    assert "generate_session_id" in analytics.__all__
    assert analytics.generate_session_id().startswith("session_")


def test_models_serialize():
    """Test that models can be instantiated and serialized."""
    from datetime import datetime
    from app.analytics.models import ActionType, Session

    now = datetime.now().astimezone()
    session = Session(session_id="s", ip_address="1.2.3.4", user_agent="", visit_date=now, last_activity=now)

    data = session.to_dict()
    assert data["session_id"] == "s"
    assert Session.from_dict(data) == session
    assert ActionType.is_valid("form_submit")
    assert not ActionType.is_valid("hover")


def test_factory_builds_blueprint(tmp_path):
    """Test that the module factory wires services to a blueprint."""
    from app.analytics.factory import create_analytics_module

    module = create_analytics_module(data_dir=tmp_path / "data", rate_limit_max_requests=5)

    assert set(module) == {"store", "recorder", "aggregator", "rate_limiter", "blueprint"}
    assert module["blueprint"].url_prefix == "/api/analytics"
    assert module["rate_limiter"].max_requests == 5
    assert module["recorder"].store is module["store"]


def test_logging_setup_and_stop():
    """Test that logging can be configured and torn down repeatedly."""
    import io
    import logging
    from app.logging_config import setup_logging, stop_logging, logging_config

    stream = io.StringIO()
    setup_logging(stream=stream)
    setup_logging(stream=stream)
    logging.getLogger("tests.logging").info("hello")
    stop_logging()

    assert "hello" in stream.getvalue()
    assert logging_config._log_listener is None
    assert logging.getLogger("werkzeug").level == logging.WARNING
