"""Tests for structured logging helpers."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from campaign_results.errors import PersistenceError
from campaign_results.logging.config import (
    configure_logging,
    get_logger,
    get_state_logger,
    log_event_divergence,
    log_state_transition,
)


class TestLoggingHelpers:
    """Transition and divergence log records."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)

    def test_loggers_available(self):
        assert get_logger(__name__) is not None
        assert get_state_logger(__name__) is not None

    def test_applied_transition(self):
        logger = Mock()

        log_state_transition(
            logger,
            result_id="aB3dE9z",
            from_state="sent",
            to_state="opened",
            trigger="opened",
            context={"version": 2}
        )

        logger.bind.assert_called_once_with(
            result_id="aB3dE9z",
            from_state="sent",
            to_state="opened",
            trigger="opened",
            applied=True,
        )
        bound = logger.bind.return_value
        bound.bind.assert_called_once_with(context={"version": 2})
        bound.bind.return_value.info.assert_called_once_with("state_transition")

    def test_suppressed_transition(self):
        logger = Mock()

        log_state_transition(
            logger,
            result_id="aB3dE9z",
            from_state="clicked",
            to_state="clicked",
            trigger="opened",
            applied=False
        )

        logger.bind.return_value.info.assert_called_once_with("state_transition_suppressed")

    def test_divergence(self):
        logger = Mock()
        ts = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)

        log_event_divergence(logger, "aB3dE9z", "clicked", ts, PersistenceError("locked"))

        logger.error.assert_called_once_with(
            "event_log_divergence",
            result_id="aB3dE9z",
            event_kind="clicked",
            event_time="2024-03-01T09:00:00+00:00",
            error="locked",
            error_type="PersistenceError",
        )

    def test_invalid_level(self):
        with pytest.raises(AttributeError):
            configure_logging(level="LOUD")
