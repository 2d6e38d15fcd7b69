"""Shipment search, carrier endpoints and PRO numbers."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from freightdesk.api.client import ApiClient
from freightdesk.api.exceptions import FreightAPIError
from freightdesk.api.models import CarrierEndpoint, SearchResult

LOGGER = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
DEFAULT_PRO_NUMBER_PATTERN = re.compile(r"^[a-zA-Z0-9]{6,}$")


def search_shipments(
    client: ApiClient,
    query: str,
    api_code: str,
    *,
    limit: int = 10,
    min_length: int = MIN_QUERY_LENGTH,
) -> List[SearchResult]:
    """Searches shipments by any reference; short queries never reach the backend."""

    if not query or len(query) < min_length:
        return []
    data = client.post("/shipments/search", {"query": query, "limit": limit}, api_code)
    if data is None:
        return []
    if not isinstance(data, list):
        raise FreightAPIError("Invalid search response: expected a list")
    return [SearchResult.from_record(item) for item in data if isinstance(item, dict)]


def list_carrier_endpoints(client: ApiClient, api_code: str) -> List[CarrierEndpoint]:
    data = client.get("/carrier_endpoints", api_code)
    if not isinstance(data, list):
        raise FreightAPIError("Invalid carrier endpoint list")
    return [CarrierEndpoint.from_record(item) for item in data if isinstance(item, dict)]


def request_pro_number(
    client: ApiClient, endpoint: CarrierEndpoint, shipment_details: Mapping[str, Any]
) -> str:
    """Asks a carrier for a PRO number.

    OAuth endpoints are sent without credentials; the token flow is not
    implemented by any carrier we integrate with.
    """

    headers: Dict[str, str] = {}
    auth: Optional[Tuple[str, str]] = None
    details = endpoint.auth_details
    if endpoint.auth_type == "apiKey" and details.get("headerName"):
        headers[details["headerName"]] = details.get("apiKey", "")
    elif endpoint.auth_type == "basic":
        auth = (details.get("username", ""), details.get("password", ""))

    data = client.post_external(endpoint.url, dict(shipment_details), headers=headers, auth=auth)
    if isinstance(data, dict):
        return str(data.get("proNumber") or "")
    return ""


def validate_pro_number(pro_number: str, carrier_format: str | None = None) -> bool:
    """Checks a PRO number against the carrier format (a regex) or the default rule."""

    if not pro_number:
        return False
    if not carrier_format:
        return DEFAULT_PRO_NUMBER_PATTERN.search(pro_number) is not None
    try:
        return re.search(carrier_format, pro_number) is not None
    except re.error as exc:
        LOGGER.error("Invalid PRO number format %r: %s", carrier_format, exc)
        return False
