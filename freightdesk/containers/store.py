"""State holder for the container tracking view.

The store owns the container list, the pagination cursor, the expanded
rows and the set of containers whose detail was fetched successfully.
Remote calls go through a task runner; every callback mutates state on the
runner's delivery thread and replaces the container tuple instead of
editing it.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial
from typing import Any, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.containers.models import UPDATABLE_FIELDS, Container, ContainerDetails
from freightdesk.containers.pagination import PageView, page_slice, page_view
from freightdesk.realtime.channel import ContainerUpdate, Subscription, UpdateChannel
from freightdesk.tasks import ImmediateTaskRunner, TaskRunner

LOGGER = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load container data. Please try again later."
DETAILS_ERROR_MESSAGE = "Failed to load container details. Please try again."
MISSING_NUMBER_MESSAGE = "Container number is missing; details are unavailable."

DEFAULT_PAGE_SIZE = 10


class ContainerSource(Protocol):
    """Remote side of the store (implemented by FreightDataProvider)."""

    def fetch_containers(self) -> List[Container]:  # pragma: no cover - protocol
        ...

    def fetch_container_details(self, container_number: str) -> ContainerDetails:  # pragma: no cover
        ...


class StoreObserver(Protocol):
    def on_store_changed(self, store: "ContainerStore") -> None:  # pragma: no cover - protocol
        """Called after any state change."""


class ContainerStore:
    def __init__(
        self,
        source: ContainerSource,
        runner: TaskRunner | None = None,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self._source = source
        self._runner: TaskRunner = runner or ImmediateTaskRunner()
        self._containers: Tuple[Container, ...] = ()
        self._loading = False
        self._error: Optional[str] = None
        self._expanded: List[str] = []
        self._fetched: Set[str] = set()
        self._in_flight: Set[str] = set()
        self._validate_page_argument("page_size", page_size)
        self._current_page = 1
        self._page_size = page_size
        self._observers: List[StoreObserver] = []
        self._subscription: Optional[Subscription] = None
        self._generation = 0

    # ------------------------------------------------------------------ state
    @property
    def containers(self) -> Tuple[Container, ...]:
        return self._containers

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def expanded_ids(self) -> Tuple[str, ...]:
        return tuple(self._expanded)

    @property
    def fetched_ids(self) -> frozenset[str]:
        """Containers whose detail fetch succeeded in the current load cycle."""

        return frozenset(self._fetched)

    @property
    def pagination(self) -> PageView:
        return page_view(len(self._containers), self._current_page, self._page_size)

    @property
    def paginated_containers(self) -> List[Container]:
        return page_slice(self._containers, self._current_page, self._page_size)

    def is_expanded(self, container_id: str) -> bool:
        return container_id in self._expanded

    def get(self, container_id: str) -> Optional[Container]:
        for container in self._containers:
            if container.id == container_id:
                return container
        return None

    # ---------------------------------------------------------------- loading
    def load(self, initial_data: Optional[Iterable[Container]] = None) -> None:
        """Starts a load cycle from ``initial_data`` or, when it is empty, from the backend."""

        self._generation += 1
        generation = self._generation
        self._loading = True
        self._error = None
        self._expanded.clear()
        self._fetched.clear()
        self._in_flight.clear()
        self._current_page = 1
        supplied = tuple(initial_data or ())
        if supplied:
            self._containers = supplied
            self._loading = False
            LOGGER.info("Loaded %d containers from caller data", len(supplied))
            self._notify()
            return

        self._notify()
        self._runner.submit(
            self._source.fetch_containers,
            partial(self._on_loaded, generation),
            partial(self._on_load_failed, generation),
        )

    def reload(self) -> None:
        self.load()

    def _on_loaded(self, generation: int, containers: Sequence[Container]) -> None:
        if generation != self._generation:
            return
        self._containers = tuple(containers)
        self._loading = False
        self._error = None
        LOGGER.info("Loaded %d containers", len(self._containers))
        self._notify()

    def _on_load_failed(self, generation: int, exc: FreightAPIError) -> None:
        if generation != self._generation:
            return
        LOGGER.error("Error loading container data: %s", exc)
        self._containers = ()
        self._loading = False
        self._error = LOAD_ERROR_MESSAGE
        self._notify()

    # -------------------------------------------------------------- expanding
    def toggle_expand(self, container_id: str) -> None:
        """Opens or closes a row; opening a row without fetched detail starts the fetch."""

        if container_id in self._expanded:
            self._expanded.remove(container_id)
            self._notify()
            return
        if self.get(container_id) is None:
            LOGGER.debug("Ignoring expand of unknown container %s", container_id)
            return
        self._expanded.append(container_id)
        self._notify()
        self.fetch_details(container_id)

    def fetch_details(self, container_id: str) -> None:
        """Fetches lot details and attachments unless fetched already or in flight."""

        if container_id in self._fetched or container_id in self._in_flight:
            return
        container = self.get(container_id)
        if container is None:
            return
        if not container.number:
            self._replace(container_id, is_loading_details=False, details_error=MISSING_NUMBER_MESSAGE)
            self._notify()
            return

        self._in_flight.add(container_id)
        self._replace(container_id, is_loading_details=True, details_error=None)
        self._notify()
        self._runner.submit(
            partial(self._source.fetch_container_details, container.number),
            partial(self._on_details_loaded, self._generation, container_id),
            partial(self._on_details_failed, self._generation, container_id, container.number),
        )

    def retry_details(self, container_id: str) -> None:
        self.fetch_details(container_id)

    def find_by_number(self, container_number: str) -> Optional[Container]:
        wanted = container_number.strip().upper()
        if not wanted:
            return None
        for container in self._containers:
            if container.number.upper() == wanted:
                return container
        return None

    def reveal(self, container_id: str) -> bool:
        """Moves to the page holding the container and expands its row."""

        for index, container in enumerate(self._containers):
            if container.id == container_id:
                break
        else:
            return False
        self._current_page = index // self._page_size + 1
        if container_id in self._expanded:
            self._notify()
            return True
        self.toggle_expand(container_id)
        return True

    def _on_details_loaded(
        self, generation: int, container_id: str, details: ContainerDetails
    ) -> None:
        if generation != self._generation:
            return
        self._in_flight.discard(container_id)
        self._replace(
            container_id,
            cfs_lot_details=details.cfs_lot_details,
            container_attachments=details.container_attachments,
            is_loading_details=False,
            details_error=None,
        )
        self._fetched.add(container_id)
        self._notify()

    def _on_details_failed(
        self, generation: int, container_id: str, number: str, exc: FreightAPIError
    ) -> None:
        if generation != self._generation:
            return
        LOGGER.error("Error fetching details for container %s: %s", number, exc)
        self._in_flight.discard(container_id)
        self._replace(container_id, is_loading_details=False, details_error=DETAILS_ERROR_MESSAGE)
        self._notify()

    # ------------------------------------------------------------- pagination
    def set_page_size(self, page_size: int) -> None:
        self._validate_page_argument("page_size", page_size)
        self._page_size = page_size
        self._current_page = 1
        self._notify()

    def set_current_page(self, page: int) -> None:
        self._validate_page_argument("page", page)
        self._current_page = page
        self._notify()

    # -------------------------------------------------------------- realtime
    def attach_channel(self, channel: UpdateChannel) -> None:
        """Applies updates published on ``channel`` until ``close`` is called."""

        if self._subscription is not None:
            self._subscription.unsubscribe()
        self._subscription = channel.subscribe(self.apply_update)

    def apply_update(self, update: ContainerUpdate) -> None:
        if self.get(update.container_id) is None:
            LOGGER.debug("Update for unknown container %s ignored", update.container_id)
            return
        changes = {}
        for name, value in update.changes.items():
            if name in UPDATABLE_FIELDS:
                changes[name] = "" if value is None else str(value)
            else:
                LOGGER.warning(
                    "Field %s of container %s cannot be updated remotely",
                    name,
                    update.container_id,
                )
        if not changes:
            return
        self._replace(update.container_id, **changes)
        self._notify()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    # -------------------------------------------------------------- observers
    def register_observer(self, observer: StoreObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def unregister_observer(self, observer: StoreObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer.on_store_changed(self)
            except Exception as exc:  # pragma: no cover - logged, other observers still run
                LOGGER.error("Store observer %s failed: %s", observer, exc, exc_info=True)

    # ---------------------------------------------------------------- helpers
    def _replace(self, container_id: str, **changes: Any) -> None:
        self._containers = tuple(
            replace(container, **changes) if container.id == container_id else container
            for container in self._containers
        )

    @staticmethod
    def _validate_page_argument(name: str, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")
