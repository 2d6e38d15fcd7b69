"""Expandable tree of containers with shipment, lot and attachment rows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Collection, List, Sequence

from PySide6 import QtCore, QtGui, QtWidgets

from freightdesk.containers.models import Container, Shipment
from freightdesk.i18n.translator import translate
from freightdesk.utils.helpers import display_value

CONTAINER_ID_ROLE = QtCore.Qt.ItemDataRole.UserRole


@dataclass(slots=True)
class ColumnDefinition:
    header: str
    render: Callable[[Container], Any]

    def text(self, container: Container) -> str:
        return display_value(self.render(container))


def default_columns() -> List[ColumnDefinition]:
    return [
        ColumnDefinition(translate("columns.number"), lambda c: c.number),
        ColumnDefinition(translate("columns.type"), lambda c: c.type),
        ColumnDefinition(translate("columns.status"), lambda c: c.status),
        ColumnDefinition(translate("columns.location"), lambda c: c.location),
        ColumnDefinition(translate("columns.eta"), lambda c: c.eta),
        ColumnDefinition(translate("columns.vessel"), lambda c: c.vessel),
        ColumnDefinition(translate("columns.carrier"), lambda c: c.carrier),
        ColumnDefinition(translate("columns.route"), lambda c: f"{c.pol} / {c.pod}"),
        ColumnDefinition(translate("columns.mbl"), lambda c: c.mbl),
    ]


class ContainerTable(QtWidgets.QWidget):
    """Renders one page of containers; expanding a row asks the store for its detail.

    The widget holds no state of its own: every store change rebuilds the
    tree from the page slice and the set of expanded ids.
    """

    toggle_requested = QtCore.Signal(str)
    retry_requested = QtCore.Signal(str)

    def __init__(
        self,
        columns: Sequence[ColumnDefinition] | None = None,
        parent: QtWidgets.QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._columns = list(columns) if columns else default_columns()
        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self._tree = QtWidgets.QTreeWidget()
        self._tree.setHeaderLabels([column.header for column in self._columns])
        header = self._tree.header()
        header.setStretchLastSection(True)
        header.setSectionResizeMode(QtWidgets.QHeaderView.ResizeMode.Interactive)
        self._tree.setUniformRowHeights(False)
        self._tree.setAlternatingRowColors(True)
        self._tree.setSelectionMode(QtWidgets.QAbstractItemView.SelectionMode.SingleSelection)
        self._tree.itemExpanded.connect(self._on_item_toggled)
        self._tree.itemCollapsed.connect(self._on_item_toggled)
        layout.addWidget(self._tree)

    @property
    def tree(self) -> QtWidgets.QTreeWidget:
        return self._tree

    def column_widths(self) -> List[int]:
        return [self._tree.columnWidth(index) for index in range(len(self._columns))]

    def apply_column_widths(self, widths: Sequence[int]) -> None:
        for index, width in enumerate(widths[: len(self._columns)]):
            if width > 0:
                self._tree.setColumnWidth(index, width)

    # --------------------------------------------------------------- rendering
    def set_containers(self, containers: Sequence[Container], expanded: Collection[str]) -> None:
        self._tree.blockSignals(True)
        try:
            self._tree.clear()
            if not containers:
                self._add_placeholder(translate("containers.empty"))
                return
            for container in containers:
                item = self._create_container_item(container)
                if container.id in expanded:
                    self._populate_details(item, container)
                    item.setExpanded(True)
        finally:
            self._tree.blockSignals(False)

    def show_placeholder(self, message: str) -> None:
        self._tree.blockSignals(True)
        try:
            self._tree.clear()
            self._add_placeholder(message)
        finally:
            self._tree.blockSignals(False)

    def _add_placeholder(self, message: str) -> None:
        placeholder = QtWidgets.QTreeWidgetItem([message] + [""] * (len(self._columns) - 1))
        placeholder.setFlags(QtCore.Qt.ItemFlag.ItemIsEnabled)
        font = placeholder.font(0)
        font.setItalic(True)
        placeholder.setFont(0, font)
        self._tree.addTopLevelItem(placeholder)

    def _create_container_item(self, container: Container) -> QtWidgets.QTreeWidgetItem:
        values = [column.text(container) for column in self._columns]
        item = QtWidgets.QTreeWidgetItem(self._tree, values)
        item.setData(0, CONTAINER_ID_ROLE, container.id)
        item.setChildIndicatorPolicy(
            QtWidgets.QTreeWidgetItem.ChildIndicatorPolicy.ShowIndicator
        )
        for index, value in enumerate(values):
            item.setToolTip(index, value)
        if container.details_error:
            item.setForeground(0, QtGui.QBrush(QtGui.QColor("#c01547")))
        return item

    def _populate_details(self, item: QtWidgets.QTreeWidgetItem, container: Container) -> None:
        for shipment in container.shipments:
            self._add_shipment(item, shipment)

        if container.is_loading_details:
            self._add_child(item, translate("containers.loading_details"), italic=True)
            return
        if container.details_error:
            error_item = self._add_child(item, container.details_error, spanned=False)
            error_item.setForeground(0, QtGui.QBrush(QtGui.QColor("#c01547")))
            self._attach_retry_button(error_item, container.id)
            return
        if container.cfs_lot_details is None:
            return
        if not container.cfs_lot_details:
            self._add_child(item, translate("containers.no_lots"), italic=True)
        for lot in container.cfs_lot_details:
            self._add_child(
                item,
                translate(
                    "lot.row",
                    lot=display_value(lot.lot_number),
                    hbl=display_value(lot.house_bill_number),
                    pieces=display_value(lot.pieces_received),
                    pounds=display_value(lot.pounds),
                    cbm=display_value(lot.cbm),
                ),
                tooltip=lot.description,
            )
        attachments = container.container_attachments or ()
        if attachments:
            attachments_item = self._add_child(
                item, translate("containers.attachments", count=len(attachments))
            )
            for attachment in attachments:
                self._add_child(attachments_item, attachment)
            attachments_item.setExpanded(True)

    def _add_shipment(self, parent: QtWidgets.QTreeWidgetItem, shipment: Shipment) -> None:
        shipment_item = self._add_child(
            parent,
            translate(
                "shipment.row",
                type=shipment.type,
                hbl=display_value(shipment.hbl),
                mbl=display_value(shipment.mbl),
            ),
        )
        for key, record in (
            ("shipment.customs", shipment.customs_clearance),
            ("shipment.freight_release", shipment.freight_release),
            ("shipment.lfd", shipment.lfd),
        ):
            if record is not None:
                self._add_child(
                    shipment_item,
                    translate(key, status=record.status, date=display_value(record.date)),
                )
        shipment_item.setExpanded(True)

    def _add_child(
        self,
        parent: QtWidgets.QTreeWidgetItem,
        text: str,
        *,
        italic: bool = False,
        tooltip: str = "",
        spanned: bool = True,
    ) -> QtWidgets.QTreeWidgetItem:
        child = QtWidgets.QTreeWidgetItem(parent, [text])
        child.setFirstColumnSpanned(spanned)
        child.setFlags(QtCore.Qt.ItemFlag.ItemIsEnabled)
        if tooltip:
            child.setToolTip(0, tooltip)
        if italic:
            font = child.font(0)
            font.setItalic(True)
            child.setFont(0, font)
        return child

    def _attach_retry_button(self, item: QtWidgets.QTreeWidgetItem, container_id: str) -> None:
        button = QtWidgets.QToolButton()
        button.setText(translate("actions.retry_details"))
        button.clicked.connect(
            lambda _checked=False, cid=container_id: self._emit_later(self.retry_requested, cid)
        )
        self._tree.setItemWidget(item, 1, button)

    # ---------------------------------------------------------------- signals
    def _on_item_toggled(self, item: QtWidgets.QTreeWidgetItem) -> None:
        container_id = item.data(0, CONTAINER_ID_ROLE)
        if isinstance(container_id, str):
            self._emit_later(self.toggle_requested, container_id)

    @staticmethod
    def _emit_later(signal: QtCore.SignalInstance, container_id: str) -> None:
        # receivers rebuild the tree, which deletes the item that emitted
        QtCore.QTimer.singleShot(0, lambda: signal.emit(container_id))
