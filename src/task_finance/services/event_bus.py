"""In-process event bus for finance data changes.

Writers publish an event after changing a time entry, a cost item, a task
status or finance settings; caches and views subscribe to the events they
depend on.
"""

import logging
import threading
from collections import defaultdict
from enum import Enum
from typing import Any, Callable, DefaultDict, List, Union

logger = logging.getLogger(__name__)

Listener = Callable[..., None]


class FinanceEvent(str, Enum):
    """Events that can change finance figures."""

    TIME_ENTRY_CHANGED = "time_entry_changed"
    COST_ITEM_CHANGED = "cost_item_changed"
    TASK_STATUS_CHANGED = "task_status_changed"
    TASK_SETTINGS_CHANGED = "task_settings_changed"


class FinanceEventBus:
    """Publish/subscribe hub for FinanceEvent notifications.

    Listeners are called synchronously, in subscription order, with the
    keyword payload given to ``publish``. A listener exception propagates
    to the publisher.

    Example:
        >>> bus = FinanceEventBus()
        >>> unsubscribe = bus.subscribe("time_entry_changed", print_task)
        >>> bus.publish("time_entry_changed", task_id="task-1")
        >>> unsubscribe()
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[FinanceEvent, List[Listener]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(
        self, event: Union[FinanceEvent, str], listener: Listener
    ) -> Callable[[], None]:
        """Register a listener for an event.

        Args:
            event: Event (or its string value) to listen for
            listener: Callable receiving the event payload as keywords

        Returns:
            Function that removes the listener again

        Raises:
            ValueError: If the event name is unknown
        """
        finance_event = FinanceEvent(event)
        with self._lock:
            self._listeners[finance_event].append(listener)
        logger.debug(f"Listener subscribed to {finance_event.value}")

        def unsubscribe() -> None:
            with self._lock:
                listeners = self._listeners[finance_event]
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def publish(self, event: Union[FinanceEvent, str], **payload: Any) -> int:
        """Notify every listener of an event.

        Args:
            event: Event (or its string value) that happened
            **payload: Event details, e.g. ``task_id``

        Returns:
            Number of listeners notified

        Raises:
            ValueError: If the event name is unknown
        """
        finance_event = FinanceEvent(event)
        with self._lock:
            listeners = list(self._listeners[finance_event])

        logger.debug(
            f"Publishing {finance_event.value} to {len(listeners)} listeners "
            f"(payload={payload})"
        )
        for listener in listeners:
            listener(event=finance_event, **payload)
        return len(listeners)

    def listener_count(self, event: Union[FinanceEvent, str]) -> int:
        with self._lock:
            return len(self._listeners[FinanceEvent(event)])
