"""Immutable records for tracked containers and their shipments.

Every record is a frozen dataclass; the store replaces records with
``dataclasses.replace`` instead of mutating them.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class StatusRecord:
    """Status plus the date it was reached (customs, freight release, LFD)."""

    status: str
    date: str = "-"


@dataclass(frozen=True, slots=True)
class Shipment:
    id: str
    type: str
    hbl: str
    mbl: str
    pieces: int = 0
    volume: str = "-"  # CBM
    dimensions: str = "-"
    weight: str = "-"
    customs_clearance: Optional[StatusRecord] = None
    freight_release: Optional[StatusRecord] = None
    lfd: Optional[StatusRecord] = None


@dataclass(frozen=True, slots=True)
class CFSLotDetail:
    """One lot received at the container freight station."""

    ams_bl_number: str = ""
    house_bill_number: str = ""
    pieces_received: str = ""
    pieces_manifested: str = ""
    pieces_type: str = ""
    pounds: str = ""
    cbm: str = ""
    description: str = ""
    destination: str = ""
    headload: str = ""
    hold: str = ""
    marks_hold: str = ""
    hazmat: str = ""
    ship_date: str = ""
    job_number: str = ""
    lot_number: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CFSLotDetail":
        def text(key: str) -> str:
            value = record.get(key)
            return "" if value is None else str(value)

        return cls(
            ams_bl_number=text("amsBlNumber"),
            house_bill_number=text("houseBillNumber"),
            pieces_received=text("piecesReceived"),
            pieces_manifested=text("piecesManifested"),
            pieces_type=text("piecesType"),
            pounds=text("pounds"),
            cbm=text("cbm"),
            description=text("description"),
            destination=text("destination"),
            headload=text("headload"),
            hold=text("hold"),
            marks_hold=text("marksHold"),
            hazmat=text("hazmat"),
            ship_date=text("shipDate"),
            job_number=text("jobNumber"),
            lot_number=text("lotNumber"),
        )


@dataclass(frozen=True, slots=True)
class ContainerDetails:
    """Result of a detail fetch; both parts always arrive together."""

    cfs_lot_details: Tuple[CFSLotDetail, ...] = ()
    container_attachments: Tuple[str, ...] = ()

    @classmethod
    def from_payload(cls, payload: Optional[Mapping[str, Any]]) -> "ContainerDetails":
        payload = payload or {}
        lots = payload.get("cfsLotDetails") or []
        attachments = payload.get("containerAttachments") or []
        return cls(
            cfs_lot_details=tuple(
                CFSLotDetail.from_record(lot) for lot in lots if isinstance(lot, Mapping)
            ),
            container_attachments=tuple(str(item) for item in attachments if item),
        )


@dataclass(frozen=True, slots=True)
class Container:
    """A tracked container.

    ``cfs_lot_details`` and ``container_attachments`` stay ``None`` until a
    detail fetch succeeds; ``is_loading_details`` and ``details_error`` are
    transient view flags.
    """

    id: str
    number: str
    type: str = "Unknown"
    status: str = "Unknown"
    location: str = ""
    eta: str = ""
    vessel: str = ""
    carrier: str = "Unknown"
    pol: str = "Unknown"  # port of loading
    pod: str = "Unknown"  # port of discharge
    mbl: str = ""
    shipments: Tuple[Shipment, ...] = ()
    job_number: str = ""
    customer_reference: str = ""
    available_at_pier: str = ""
    appointment_date: str = ""
    outgated_date: str = ""
    date_in: str = ""
    strip_date: str = ""
    available_at_stg: str = ""
    return_empty_date: str = ""
    go_date: str = ""
    cfs_lot_details: Optional[Tuple[CFSLotDetail, ...]] = None
    container_attachments: Optional[Tuple[str, ...]] = None
    is_loading_details: bool = False
    details_error: Optional[str] = None

    @property
    def has_details(self) -> bool:
        return self.cfs_lot_details is not None


# Top-level fields a pushed update may change; everything else is owned by the store.
UPDATABLE_FIELDS = frozenset(
    {
        "status",
        "location",
        "eta",
        "vessel",
        "carrier",
        "pol",
        "pod",
        "mbl",
        "available_at_pier",
        "appointment_date",
        "outgated_date",
        "date_in",
        "strip_date",
        "available_at_stg",
        "return_empty_date",
        "go_date",
    }
)


def _text(record: Mapping[str, Any], key: str, default: str = "") -> str:
    value = record.get(key)
    if value is None or value == "":
        return default
    return str(value)


def _derived_shipment(record: Mapping[str, Any]) -> Shipment:
    """The listing has no shipment rows; one is derived from the container's own dates."""

    status = _text(record, "status", "Unknown")
    go_date = _text(record, "goDate")
    return Shipment(
        id=f"SHIP-{_text(record, 'jobNumber')}",
        type="Ocean Import",
        hbl=_text(record, "customerReference", "-"),
        mbl=_text(record, "masterBillNumber"),
        customs_clearance=StatusRecord(status, _text(record, "availableAtPier", "-")),
        freight_release=StatusRecord(
            "Released" if status == "Available" else "Not Released",
            _text(record, "availableAtSTG", "-"),
        ),
        lfd=StatusRecord("Set" if go_date else "Not Set", go_date or "-"),
    )


def container_from_record(record: Mapping[str, Any]) -> Container:
    """Maps one record of the listing endpoint to a Container."""

    identifier = _text(record, "id") or f"stg-{uuid.uuid4().hex[:12]}"
    return Container(
        id=identifier,
        number=_text(record, "containerNumber"),
        type=_text(record, "type", "Unknown"),
        status=_text(record, "status", "Unknown"),
        location=_text(record, "location"),
        eta=_text(record, "vesselETA"),
        vessel=_text(record, "vesselName"),
        carrier=_text(record, "carrier", "Unknown"),
        pol=_text(record, "pol", "Unknown"),
        pod=_text(record, "pod", "Unknown"),
        mbl=_text(record, "masterBillNumber"),
        shipments=(_derived_shipment(record),),
        job_number=_text(record, "jobNumber"),
        customer_reference=_text(record, "customerReference"),
        available_at_pier=_text(record, "availableAtPier"),
        appointment_date=_text(record, "appointmentDate"),
        outgated_date=_text(record, "outgatedDate"),
        date_in=_text(record, "dateIn"),
        strip_date=_text(record, "stripDate"),
        available_at_stg=_text(record, "availableAtSTG"),
        return_empty_date=_text(record, "returnEmptyDate"),
        go_date=_text(record, "goDate"),
    )


def listing_fields(container: Container) -> Dict[str, str]:
    """Values of the fields a pushed update may change."""

    return {name: getattr(container, name) for name in sorted(UPDATABLE_FIELDS)}
