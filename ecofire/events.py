"""
In-process change notifications.

Services publish a DataChanged event after every write so that dependents
(cached progress data, derived job impact values) can react without the
writer knowing about them.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from threading import Lock
from typing import Callable

logger = logging.getLogger(__name__)

# Topics
QBOS = "qbos"
PIS = "pis"
JOBS = "jobs"
TASKS = "tasks"
PI_QBO_MAPPINGS = "pi_qbo_mappings"
PI_JOB_MAPPINGS = "pi_job_mappings"
BUSINESS_FUNCTIONS = "business_functions"

# Collections the progress chart is computed from
ALL_TOPICS = (QBOS, PIS, JOBS, TASKS, PI_QBO_MAPPINGS, PI_JOB_MAPPINGS)


@dataclass(frozen=True)
class DataChanged:
    user_id: str
    collection: str
    action: str  # created, updated, deleted, toggled, recalculated
    ids: tuple[str, ...] = field(default_factory=tuple)


Subscriber = Callable[[DataChanged], None]


class EventBus:
    """Synchronous publish/subscribe channel keyed by collection name"""

    def __init__(self):
        self._subscribers: dict[str, list[Subscriber]] = defaultdict(list)
        self._lock = Lock()

    def subscribe(self, topic: str, callback: Subscriber) -> Callable[[], None]:
        """Register callback for topic; returns a function that unsubscribes it"""
        with self._lock:
            self._subscribers[topic].append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers[topic]:
                    self._subscribers[topic].remove(callback)

        return unsubscribe

    def subscribe_many(self, topics, callback: Subscriber) -> Callable[[], None]:
        handles = [self.subscribe(topic, callback) for topic in topics]

        def unsubscribe_all():
            for handle in handles:
                handle()

        return unsubscribe_all

    def publish(self, event: DataChanged) -> int:
        """
        Deliver event to every subscriber of its collection.
        A failing subscriber is logged and does not stop delivery to the rest.
        Returns the number of subscribers that handled the event.
        """
        with self._lock:
            subscribers = list(self._subscribers.get(event.collection, ()))

        delivered = 0
        for callback in subscribers:
            try:
                callback(event)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Subscriber {getattr(callback, '__name__', callback)} failed for "
                    f"{event.collection}/{event.action}: {e}"
                )
        return delivered

    def clear(self) -> None:
        with self._lock:
            self._subscribers.clear()


# Global event bus instance
event_bus = EventBus()


def notify(user_id: str, collection: str, action: str, *ids: str) -> None:
    """Publish a DataChanged event on the global bus"""
    event_bus.publish(DataChanged(user_id=user_id, collection=collection, action=action, ids=ids))
