"""Session-scoped cache of carrier endpoints."""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from freightdesk.api.exceptions import FreightAPIError
from freightdesk.api.models import CarrierEndpoint

LOGGER = logging.getLogger(__name__)

EndpointLoader = Callable[[], List[CarrierEndpoint]]


class CarrierEndpointCache:
    """Loads the carrier endpoint list once and serves it until invalidated.

    One instance is built per application session and handed to whoever
    needs endpoints. ``ttl_sec=None`` keeps the value for the life of the
    instance. Failed loads return an empty list and are not cached, so the
    next call tries again.
    """

    def __init__(
        self,
        loader: EndpointLoader,
        *,
        ttl_sec: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl_sec = ttl_sec
        self._clock = clock
        self._endpoints: Optional[List[CarrierEndpoint]] = None
        self._loaded_at = 0.0

    @property
    def ttl_sec(self) -> Optional[float]:
        return self._ttl_sec

    @property
    def is_loaded(self) -> bool:
        return self._endpoints is not None and not self._expired()

    def get(self) -> List[CarrierEndpoint]:
        if self.is_loaded:
            assert self._endpoints is not None
            return list(self._endpoints)
        try:
            endpoints = self._loader()
        except FreightAPIError as exc:
            LOGGER.error("Cannot load carrier endpoints: %s", exc)
            return []
        self._endpoints = list(endpoints)
        self._loaded_at = self._clock()
        LOGGER.debug("Cached %d carrier endpoints", len(self._endpoints))
        return list(self._endpoints)

    def find(self, name: str) -> Optional[CarrierEndpoint]:
        for endpoint in self.get():
            if endpoint.name == name:
                return endpoint
        return None

    def invalidate(self) -> None:
        self._endpoints = None

    def _expired(self) -> bool:
        if self._ttl_sec is None:
            return False
        return self._clock() - self._loaded_at >= self._ttl_sec
