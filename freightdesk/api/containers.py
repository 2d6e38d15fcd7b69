"""Container endpoints: listing, per-container detail and CFS cargo detail."""

from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

from freightdesk.api.client import ApiClient
from freightdesk.api.exceptions import FreightAPIError


def list_containers(client: ApiClient, api_code: str) -> List[Dict[str, Any]]:
    """Returns the raw container records of the listing endpoint."""

    data = client.get("/container", api_code)
    if not isinstance(data, list):
        raise FreightAPIError(f"Invalid container listing: expected a list, got {type(data).__name__}")
    return [record for record in data if isinstance(record, dict)]


def fetch_container_details(client: ApiClient, container_number: str, api_code: str) -> Dict[str, Any]:
    """Returns lot details and attachments for one container number.

    An empty body means the backend has no detail for the container.
    """

    data = client.get(f"/container/{quote(container_number, safe='')}", api_code)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise FreightAPIError(
            f"Invalid detail for container {container_number}: expected an object"
        )
    for key in ("cfsLotDetails", "containerAttachments"):
        if data.get(key) is not None and not isinstance(data[key], list):
            raise FreightAPIError(
                f"Invalid detail for container {container_number}: {key} is not a list"
            )
    return data


def fetch_cfs_cargo_details(client: ApiClient, job_lot_number: str, api_code: str) -> Dict[str, Any]:
    data = client.get(f"/jobLot/{quote(job_lot_number, safe='')}", api_code)
    if not isinstance(data, dict):
        raise FreightAPIError(f"Invalid cargo detail for lot {job_lot_number}")
    return data
