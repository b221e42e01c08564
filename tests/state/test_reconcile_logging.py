"""Tests for reconciliation audit logging."""

from unittest.mock import MagicMock, patch

import structlog

from conftest import record
from notisync.logging import configure_logging, get_logger
from notisync.logging.config import log_action_decision
from notisync.state.classify import reconcile


class TestLogActionDecision:
    """Test decision log levels."""

    def test_noop_logs_at_debug(self):
        logger = MagicMock()
        bound = logger.bind.return_value

        log_action_decision(logger, identity=1, action="noop", reason="unchanged")

        bound.debug.assert_called_once_with("Action decided")
        bound.info.assert_not_called()

    def test_notify_logs_at_info_with_context(self):
        logger = MagicMock()
        bound = logger.bind.return_value.bind.return_value

        log_action_decision(logger, identity=1, action="notify", reason="added", context={"v": 2})

        logger.bind.return_value.bind.assert_called_once_with(context={"v": 2})
        bound.info.assert_called_once_with("Action decided")


class TestReconcileLogging:
    """Test logging emitted during a reconcile pass."""

    def test_inactive_addition_warns(self):
        with patch("notisync.state.classify.reconcile_logger") as logger:
            actions = list(reconcile([], [record(3, active=False)]))

        assert actions[0].reason == "inactive_addition"
        logger.warning.assert_called_once()
        assert logger.warning.call_args.kwargs["identity"] == 3

    def test_every_action_is_logged(self):
        with patch("notisync.state.classify.log_action_decision") as log_decision:
            list(reconcile([record(1)], [record(1), record(2)]))

        decisions = [
            (c.kwargs["identity"], c.kwargs["action"], c.kwargs["reason"])
            for c in log_decision.call_args_list
        ]
        assert decisions == [(1, "noop", "unchanged"), (2, "notify", "added")]


class TestConfigureLogging:
    """Test logging setup."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_configure_and_get_logger(self):
        configure_logging(level="DEBUG", format_json=True)
        logger = get_logger("notisync.test")

        logger.info("configured", component="test")
