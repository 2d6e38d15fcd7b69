"""High-level access to the freight backend for the store and the UI.

Combines `ApiClient`, the endpoint functions in `freightdesk.api` and the
``api``/``search`` settings groups. Container listing, container detail and
search raise `FreightAPIError` so the caller can surface the failure;
cargo detail and PRO number lookups log the failure and return empty values.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from freightdesk.api import containers, shipments
from freightdesk.api.cache import CarrierEndpointCache
from freightdesk.api.client import ApiClient
from freightdesk.api.exceptions import FreightAPIError
from freightdesk.api.models import CarrierEndpoint, SearchResult
from freightdesk.containers.models import Container, ContainerDetails, container_from_record
from freightdesk.settings.registry import SettingsRegistry

LOGGER = logging.getLogger(__name__)


class FreightDataProvider:
    def __init__(
        self,
        client: ApiClient,
        settings: SettingsRegistry,
        *,
        endpoint_cache: Optional[CarrierEndpointCache] = None,
        endpoints_ttl_sec: Optional[float] = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._endpoint_cache = endpoint_cache or CarrierEndpointCache(
            self._load_carrier_endpoints, ttl_sec=endpoints_ttl_sec
        )

    @property
    def endpoint_cache(self) -> CarrierEndpointCache:
        return self._endpoint_cache

    # ------------------------------------------------------------------ helpers
    def _containers_code(self) -> str:
        return str(self._settings.get_value("api", "containers_code", default="containers"))

    def _auth_code(self) -> str:
        return str(self._settings.get_value("api", "auth_code", default="auth"))

    def _load_carrier_endpoints(self) -> List[CarrierEndpoint]:
        return shipments.list_carrier_endpoints(self._client, self._auth_code())

    # -------------------------------------------------------------- containers
    def fetch_containers(self) -> List[Container]:
        """Returns every tracked container mapped from the listing endpoint."""

        records = containers.list_containers(self._client, self._containers_code())
        return [container_from_record(record) for record in records]

    def fetch_container_details(self, container_number: str) -> ContainerDetails:
        payload = containers.fetch_container_details(
            self._client, container_number, self._containers_code()
        )
        return ContainerDetails.from_payload(payload)

    def fetch_cargo_details(self, job_lot_number: str) -> Dict[str, Any]:
        """Returns the CFS cargo record of a job lot, or an empty dict on failure."""

        try:
            return containers.fetch_cfs_cargo_details(
                self._client, job_lot_number, self._containers_code()
            )
        except FreightAPIError as exc:
            LOGGER.error("Cannot fetch CFS cargo details for job lot %s: %s", job_lot_number, exc)
            return {}

    # ---------------------------------------------------------------- shipments
    def search_shipments(self, query: str) -> List[SearchResult]:
        return shipments.search_shipments(
            self._client,
            query,
            self._auth_code(),
            limit=int(self._settings.get_value("search", "result_limit", default=10)),
            min_length=int(self._settings.get_value("search", "min_query_length", default=3)),
        )

    def carrier_endpoints(self) -> List[CarrierEndpoint]:
        return self._endpoint_cache.get()

    def fetch_pro_number(self, carrier_id: str, shipment_details: Mapping[str, Any]) -> str:
        """Requests a PRO number from the carrier named ``carrier_id``; "" on failure."""

        endpoint = self._endpoint_cache.find(carrier_id)
        if endpoint is None:
            LOGGER.error("Carrier endpoint not found for: %s", carrier_id)
            return ""
        try:
            return shipments.request_pro_number(self._client, endpoint, shipment_details)
        except FreightAPIError as exc:
            LOGGER.error("Cannot fetch PRO number from %s: %s", carrier_id, exc)
            return ""

    @staticmethod
    def validate_pro_number(pro_number: str, carrier_format: str | None = None) -> bool:
        return shipments.validate_pro_number(pro_number, carrier_format)
