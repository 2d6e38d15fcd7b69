"""In-process message channel for container updates.

Producers (the status poller, or any other event source) ``publish``
updates from any thread. Consumers ``subscribe`` and receive the updates
when the owning thread calls ``drain``, so subscribers never run
concurrently with the GUI.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from queue import Empty, Queue
from types import TracebackType
from typing import Any, Callable, Dict, List, Optional, Sequence, Type

from freightdesk.containers.models import Container, listing_fields

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ContainerUpdate:
    """Changed top-level fields of one container."""

    container_id: str
    changes: Dict[str, Any] = field(default_factory=dict)


UpdateCallback = Callable[[ContainerUpdate], None]


class Subscription:
    """Handle returned by ``UpdateChannel.subscribe``; usable as a context manager."""

    def __init__(self, channel: "UpdateChannel", token: int) -> None:
        self._channel = channel
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._channel._remove_subscriber(self._token)
        self._active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        self.unsubscribe()


class UpdateChannel:
    def __init__(self) -> None:
        self._inbox: "Queue[ContainerUpdate]" = Queue()
        self._subscribers: Dict[int, UpdateCallback] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @property
    def pending(self) -> int:
        return self._inbox.qsize()

    @property
    def closed(self) -> bool:
        return self._closed

    def publish(self, update: ContainerUpdate) -> None:
        """Queues an update; safe to call from any thread."""

        if self._closed:
            LOGGER.warning("Update for %s dropped: channel is closed", update.container_id)
            return
        self._inbox.put(update)

    def subscribe(self, callback: UpdateCallback) -> Subscription:
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = callback
        return Subscription(self, token)

    def drain(self, max_items: Optional[int] = None) -> int:
        """Delivers queued updates to the current subscribers; returns how many were taken."""

        delivered = 0
        while max_items is None or delivered < max_items:
            try:
                update = self._inbox.get_nowait()
            except Empty:
                break
            delivered += 1
            with self._lock:
                callbacks = list(self._subscribers.values())
            for callback in callbacks:
                try:
                    callback(update)
                except Exception as exc:  # pragma: no cover - logged, other subscribers still run
                    LOGGER.error(
                        "Subscriber %s failed on update for %s: %s",
                        callback,
                        update.container_id,
                        exc,
                        exc_info=True,
                    )
        return delivered

    def close(self) -> None:
        """Stops accepting updates and drops subscribers and anything still queued."""

        self._closed = True
        with self._lock:
            self._subscribers.clear()
        while True:
            try:
                self._inbox.get_nowait()
            except Empty:
                break

    def _remove_subscriber(self, token: int) -> None:
        with self._lock:
            self._subscribers.pop(token, None)


def diff_container_updates(
    current: Sequence[Container], fresh: Sequence[Container]
) -> List[ContainerUpdate]:
    """Updates turning ``current`` into ``fresh`` for containers present in both."""

    known = {container.id: listing_fields(container) for container in current}
    updates: List[ContainerUpdate] = []
    for container in fresh:
        old_fields = known.get(container.id)
        if old_fields is None:
            continue
        changes = {
            name: value
            for name, value in listing_fields(container).items()
            if old_fields.get(name) != value
        }
        if changes:
            updates.append(ContainerUpdate(container.id, changes))
    return updates
