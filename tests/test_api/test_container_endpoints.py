"""Container listing and detail endpoints."""

from __future__ import annotations

import pytest

from freightdesk.api import containers
from freightdesk.api.client import ApiClient
from freightdesk.api.exceptions import FreightAPIError


def test_list_containers_keeps_objects_only(client: ApiClient, session) -> None:
    session.respond(body=[{"id": "1"}, "junk", {"id": "2"}])
    assert containers.list_containers(client, "containers") == [{"id": "1"}, {"id": "2"}]
    assert session.calls[0]["url"].endswith("/api:containers/container")


def test_list_containers_rejects_non_list(client: ApiClient, session) -> None:
    session.respond(body={"items": []})
    with pytest.raises(FreightAPIError, match="expected a list"):
        containers.list_containers(client, "containers")


def test_fetch_container_details_quotes_number(client: ApiClient, session) -> None:
    session.respond(body={"cfsLotDetails": [], "containerAttachments": []})
    containers.fetch_container_details(client, "MSCU 123/4", "containers")
    assert session.calls[0]["url"].endswith("/container/MSCU%20123%2F4")


def test_fetch_container_details_empty_body(client: ApiClient, session) -> None:
    session.respond(status_code=204)
    assert containers.fetch_container_details(client, "MSCU1234567", "containers") == {}


def test_fetch_container_details_rejects_list(client: ApiClient, session) -> None:
    session.respond(body=[1, 2])
    with pytest.raises(FreightAPIError):
        containers.fetch_container_details(client, "MSCU1234567", "containers")


def test_fetch_cfs_cargo_details(client: ApiClient, session) -> None:
    session.respond(body={"lot": "42", "pieces": 3})
    assert containers.fetch_cfs_cargo_details(client, "42", "containers") == {
        "lot": "42",
        "pieces": 3,
    }
    assert session.calls[0]["url"].endswith("/jobLot/42")


@pytest.mark.parametrize(
    "body", [{"cfsLotDetails": 5}, {"containerAttachments": 7}, {"cfsLotDetails": {"lot": 1}}]
)
def test_fetch_container_details_rejects_malformed_parts(client: ApiClient, session, body) -> None:
    session.respond(body=body)
    with pytest.raises(FreightAPIError, match="is not a list"):
        containers.fetch_container_details(client, "MSCU1234567", "containers")


def test_fetch_container_details_accepts_null_parts(client: ApiClient, session) -> None:
    session.respond(body={"cfsLotDetails": None, "containerAttachments": ["bol.pdf"]})
    assert containers.fetch_container_details(client, "MSCU1234567", "containers") == {
        "cfsLotDetails": None,
        "containerAttachments": ["bol.pdf"],
    }
