"""Records returned by the search and carrier endpoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True, slots=True)
class SearchResult:
    """One hit of the shipment search."""

    id: str
    reference: str
    type: str
    status: str
    customer: Optional[str] = None
    pro_number: Optional[str] = None
    booking_number: Optional[str] = None
    container_number: Optional[str] = None
    bill_of_lading: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SearchResult":
        identifier = str(record.get("id") or "")
        reference = (
            record.get("reference")
            or record.get("booking_number")
            or record.get("container_number")
            or record.get("pro_number")
            or identifier
        )
        return cls(
            id=identifier,
            reference=str(reference),
            type=record.get("type") or "Unknown",
            status=record.get("status") or "pending",
            customer=record.get("customer_name"),
            pro_number=record.get("pro_number"),
            booking_number=record.get("booking_number"),
            container_number=record.get("container_number"),
            bill_of_lading=record.get("bill_of_lading"),
            created_at=record.get("created_at"),
        )


AUTH_TYPES = ("apiKey", "oauth", "basic")


@dataclass(frozen=True, slots=True)
class CarrierEndpoint:
    """Carrier API that issues PRO numbers."""

    name: str
    url: str
    auth_type: str = "apiKey"
    auth_details: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CarrierEndpoint":
        auth_type = record.get("authType") or record.get("auth_type") or "apiKey"
        details = record.get("authDetails") or record.get("auth_details") or {}
        return cls(
            name=str(record.get("name", "")),
            url=str(record.get("url", "")),
            auth_type=auth_type if auth_type in AUTH_TYPES else "apiKey",
            auth_details={str(key): str(value) for key, value in dict(details).items()},
        )
