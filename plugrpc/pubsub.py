"""An in-memory event bus that fans topic events out to subscribers."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable, Iterator
from typing import Any


class TopicError(Exception):
    """Raised when a topic is registered twice or is not registered."""


class Subscription:
    """A receiving end of a topic.

    Delivery is unbuffered: an event reaches the subscription only when a
    caller is waiting in get() at the moment it is published; otherwise it is
    dropped. When the topic's source ends the subscription is closed.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._receivers = 0
        self._pending: deque[Any] = deque()
        self._closed = False

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def _receive(self, timeout: float | None) -> tuple[bool, Any]:
        with self._cond:
            self._receivers += 1
            try:
                ready = self._cond.wait_for(
                    lambda: bool(self._pending) or self._closed, timeout
                )
            finally:
                self._receivers -= 1
            if self._pending:
                return True, self._pending.popleft()
            if self._closed:
                return False, None
            if not ready:
                raise TimeoutError("no event received")
            return False, None

    def get(self, timeout: float | None = None) -> Any:
        """Wait for the next event; return None once the subscription is closed.

        Raises TimeoutError if nothing arrives within timeout seconds.
        """
        _ok, event = self._receive(timeout)
        return event

    def __iter__(self) -> Iterator[Any]:
        while True:
            ok, event = self._receive(None)
            if not ok:
                return
            yield event

    def _offer(self, event: Any) -> bool:
        with self._cond:
            if self._closed or self._receivers <= len(self._pending):
                return False
            self._pending.append(event)
            self._cond.notify()
            return True

    def _close(self) -> None:
        with self._cond:
            self._closed = True
            self._cond.notify_all()


class EventBus:
    """Registers named event sources and publishes their events to subscribers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._topics: dict[str, Iterable[Any]] = {}
        self._subscribers: dict[str, list[Subscription]] = {}

    def topics(self) -> list[str]:
        """Return the names of the registered topics."""
        with self._lock:
            return list(self._topics)

    def add_topic(self, name: str, src: Iterable[Any]) -> None:
        """Register a topic whose events are read from src in a background thread."""
        with self._lock:
            if name in self._topics:
                raise TopicError("topic already registered")
            self._topics[name] = src
        thread = threading.Thread(
            target=self._publish_topic, args=(name, src), name=f"pubsub-{name}", daemon=True
        )
        thread.start()

    def remove_topic(self, name: str) -> None:
        """Forget a topic; its source keeps being drained by its publisher."""
        with self._lock:
            self._topics.pop(name, None)

    def subscribe(self, name: str) -> Subscription:
        """Return a new subscription to a registered topic."""
        with self._lock:
            if name not in self._topics:
                raise TopicError(f"topic not found: {name}")
            subscription = Subscription()
            self._subscribers.setdefault(name, []).append(subscription)
            return subscription

    def _publish_topic(self, name: str, src: Iterable[Any]) -> None:
        try:
            for event in src:
                self._publish_all(name, event)
        finally:
            self._close_all(name)
            with self._lock:
                self._topics.pop(name, None)

    def _close_all(self, name: str) -> None:
        with self._lock:
            subscribers = self._subscribers.pop(name, [])
        for subscription in subscribers:
            subscription._close()

    def _publish_all(self, name: str, event: Any) -> None:
        with self._lock:
            subscribers = list(self._subscribers.get(name, ()))
        for subscription in subscribers:
            subscription._offer(event)