"""FreightDataProvider on top of a fake HTTP session."""

from __future__ import annotations

import pytest
import requests

from freightdesk.api.client import ApiClient
from freightdesk.api.data_provider import FreightDataProvider
from freightdesk.api.exceptions import FreightAPIError
from freightdesk.settings.registry import SettingsRegistry


@pytest.fixture
def provider(client: ApiClient, registry: SettingsRegistry) -> FreightDataProvider:
    return FreightDataProvider(client, registry)


def test_fetch_containers_maps_records(provider: FreightDataProvider, session) -> None:
    session.respond(
        body=[
            {"id": "c1", "containerNumber": "MSCU1234567", "status": "Available"},
            {"id": "c2", "containerNumber": "TGHU7654321"},
        ]
    )
    containers = provider.fetch_containers()
    assert [container.number for container in containers] == ["MSCU1234567", "TGHU7654321"]
    assert session.calls[0]["url"] == "https://api.example.com/api:containers/container"


def test_fetch_containers_uses_configured_code(
    provider: FreightDataProvider, registry: SettingsRegistry, session
) -> None:
    registry.set_value("api", "containers_code", "Xy12")
    session.respond(body=[])
    assert provider.fetch_containers() == []
    assert session.calls[0]["url"].endswith("/api:Xy12/container")


def test_fetch_containers_propagates_errors(provider: FreightDataProvider, session) -> None:
    session.respond(status_code=500)
    with pytest.raises(FreightAPIError):
        provider.fetch_containers()


def test_fetch_container_details(provider: FreightDataProvider, session) -> None:
    session.respond(
        body={
            "cfsLotDetails": [{"lotNumber": "L1", "houseBillNumber": "HB1", "pounds": 120}],
            "containerAttachments": ["bol.pdf"],
        }
    )
    details = provider.fetch_container_details("MSCU1234567")
    assert details.cfs_lot_details[0].lot_number == "L1"
    assert details.cfs_lot_details[0].pounds == "120"
    assert details.container_attachments == ("bol.pdf",)


def test_fetch_cargo_details_returns_empty_on_error(
    provider: FreightDataProvider, session, caplog: pytest.LogCaptureFixture
) -> None:
    session.fail(requests.Timeout("slow"))
    assert provider.fetch_cargo_details("42") == {}
    assert "job lot 42" in caplog.text


def test_search_uses_search_settings(
    provider: FreightDataProvider, registry: SettingsRegistry, session
) -> None:
    registry.set_value("search", "result_limit", 25)
    registry.set_value("search", "min_query_length", 4)
    assert provider.search_shipments("ABC") == []
    session.respond(body=[{"id": "1", "reference": "ABCD-1"}])
    results = provider.search_shipments("ABCD")
    assert results[0].reference == "ABCD-1"
    assert session.calls[0]["json"] == {"query": "ABCD", "limit": 25}
    assert "/api:auth/" in session.calls[0]["url"]


def test_search_propagates_errors(provider: FreightDataProvider, session) -> None:
    session.respond(status_code=502)
    with pytest.raises(FreightAPIError):
        provider.search_shipments("ABCD")


def test_carrier_endpoints_are_cached(provider: FreightDataProvider, session) -> None:
    session.respond(body=[{"name": "FastFreight", "url": "https://ff.example.com/pro"}])
    assert provider.carrier_endpoints()[0].name == "FastFreight"
    assert provider.carrier_endpoints()[0].name == "FastFreight"
    assert len(session.calls) == 1


def test_fetch_pro_number(provider: FreightDataProvider, session) -> None:
    session.respond(
        body=[
            {
                "name": "FastFreight",
                "url": "https://ff.example.com/pro",
                "authDetails": {"headerName": "X-Key", "apiKey": "k"},
            }
        ]
    )
    session.respond(body={"proNumber": "FF998877"})
    assert provider.fetch_pro_number("FastFreight", {"pieces": 2}) == "FF998877"
    assert session.calls[1]["url"] == "https://ff.example.com/pro"


def test_fetch_pro_number_unknown_carrier(provider: FreightDataProvider, session) -> None:
    session.respond(body=[])
    assert provider.fetch_pro_number("Nobody", {}) == ""


def test_fetch_pro_number_error(provider: FreightDataProvider, session) -> None:
    session.respond(body=[{"name": "FastFreight", "url": "https://ff.example.com/pro"}])
    session.respond(status_code=401)
    assert provider.fetch_pro_number("FastFreight", {}) == ""


def test_validate_pro_number_delegates() -> None:
    assert FreightDataProvider.validate_pro_number("ABC12345")
    assert not FreightDataProvider.validate_pro_number("AB1")
