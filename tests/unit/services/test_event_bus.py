"""Tests for FinanceEventBus."""

from unittest.mock import Mock

import pytest

from task_finance.services import FinanceEvent, FinanceEventBus


@pytest.fixture
def bus():
    return FinanceEventBus()


class TestFinanceEventBus:
    """Test suite for publish/subscribe behaviour."""

    def test_publish_calls_listener_with_payload(self, bus):
        listener = Mock()
        bus.subscribe(FinanceEvent.TIME_ENTRY_CHANGED, listener)

        notified = bus.publish(FinanceEvent.TIME_ENTRY_CHANGED, task_id="task-1")

        assert notified == 1
        listener.assert_called_once_with(
            event=FinanceEvent.TIME_ENTRY_CHANGED, task_id="task-1"
        )

    def test_string_event_names(self, bus):
        listener = Mock()
        bus.subscribe("cost_item_changed", listener)

        bus.publish(FinanceEvent.COST_ITEM_CHANGED)

        listener.assert_called_once_with(event=FinanceEvent.COST_ITEM_CHANGED)

    def test_only_matching_listeners(self, bus):
        status = Mock()
        settings = Mock()
        bus.subscribe("task_status_changed", status)
        bus.subscribe("task_settings_changed", settings)

        bus.publish("task_status_changed", task_id="task-1")

        status.assert_called_once()
        settings.assert_not_called()

    def test_subscription_order(self, bus):
        calls = []
        bus.subscribe("time_entry_changed", lambda **kw: calls.append("first"))
        bus.subscribe("time_entry_changed", lambda **kw: calls.append("second"))

        bus.publish("time_entry_changed")

        assert calls == ["first", "second"]

    def test_unsubscribe(self, bus):
        listener = Mock()
        unsubscribe = bus.subscribe("time_entry_changed", listener)

        unsubscribe()
        unsubscribe()

        assert bus.publish("time_entry_changed") == 0
        assert bus.listener_count("time_entry_changed") == 0
        listener.assert_not_called()

    def test_unknown_event(self, bus):
        with pytest.raises(ValueError):
            bus.subscribe("budget_exploded", Mock())
        with pytest.raises(ValueError):
            bus.publish("budget_exploded")

    def test_listener_error_propagates(self, bus):
        bus.subscribe("time_entry_changed", Mock(side_effect=RuntimeError("boom")))

        with pytest.raises(RuntimeError, match="boom"):
            bus.publish("time_entry_changed")
