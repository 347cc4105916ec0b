"""
Freight Service - freight trip registration and lifecycle.

This service:
- Lists freights with their drivers for the freight table
- Registers and edits freights, recomputing derived values
- Moves freights through their statuses and payment flags
- Keeps the assigned driver's availability in step with the freight
- Exports the current table view to CSV
"""

import csv
from datetime import datetime
from decimal import Decimal
from time import time
from typing import Any, Optional, TextIO

from pydantic import BaseModel

from freightboard.data.models.driver import DriverStatus
from freightboard.data.models.freight import Freight, FreightInput, FreightStatus
from freightboard.data.store import FREIGHTS_TABLE
from freightboard.services.base import BaseService
from freightboard.services.driver import DriverService
from freightboard.services.freight_filters import (
    FreightFilters,
    SortState,
    apply_filters,
    sort_freights,
)
from freightboard.utils.date_picker import format_short_date

FREIGHT_WITH_DRIVER = "*, drivers(*)"

CSV_HEADER = [
    "Data",
    "Produto",
    "Placa",
    "Motorista",
    "Origem",
    "Destino",
    "Nota Fiscal",
    "Peso (t)",
    "Sacas",
    "Valor/t",
    "Valor Total",
    "Adiantamento",
    "Saldo",
    "Status",
    "Adiantamento Pago",
    "Saldo Pago",
    "Descarga",
]


class FreightTableView(BaseModel):
    """Result of building the freight table."""

    timestamp: datetime
    freights: list[Freight]
    total_count: int
    shown_count: int
    total_weight: Decimal
    total_value: Decimal
    filters: FreightFilters
    sort: SortState
    execution_time_seconds: float


class FreightService(BaseService):
    """
    Freight Service backing the freights screen.

    Driver availability is written after the freight write as a separate
    call. A failure in between leaves the two out of step; nothing is
    rolled back.
    """

    def __init__(self, driver_service: Optional[DriverService] = None, **kwargs: Any) -> None:
        """Initialize the freight service."""
        super().__init__(service_name="freights", **kwargs)
        self.drivers = driver_service or DriverService(
            store=self.store, config_manager=self.config_manager
        )

    def list_freights(self) -> list[Freight]:
        """All freights with their driver, newest load date first."""
        rows = self.store.select(
            FREIGHTS_TABLE, columns=FREIGHT_WITH_DRIVER, order_by="date", descending=True
        )
        return [Freight.from_row(row) for row in rows]

    def get(self, freight_id: str) -> Freight:
        return Freight.from_row(self.store.get(FREIGHTS_TABLE, freight_id, columns=FREIGHT_WITH_DRIVER))

    def execute(
        self,
        filters: Optional[FreightFilters] = None,
        sort: Optional[SortState] = None,
    ) -> FreightTableView:
        """
        Build the freight table.

        Args:
            filters: Active filters (none by default)
            sort: Sort column and direction (load date, newest first, by default)

        Returns:
            FreightTableView with the visible rows and their totals
        """
        start_time = time()
        filters = filters or FreightFilters()
        sort = sort or SortState()

        freights = self.list_freights()
        shown = sort_freights(apply_filters(freights, filters), sort)

        view = FreightTableView(
            timestamp=datetime.now(),
            freights=shown,
            total_count=len(freights),
            shown_count=len(shown),
            total_weight=sum((f.weight_loaded for f in shown), Decimal("0")),
            total_value=sum((f.computed_total for f in shown), Decimal("0")),
            filters=filters,
            sort=sort,
            execution_time_seconds=time() - start_time,
        )

        self.logger.info(
            "freight_table_built",
            total=view.total_count,
            shown=view.shown_count,
            active_filters=filters.active_filter_count,
            sort_key=sort.key.value,
            descending=sort.descending,
        )
        return view

    def create(self, data: FreightInput) -> Freight:
        """Register a freight and put its driver in the matching availability."""
        start_time = time()
        payload = data.to_row(self.pricing)
        row = self.store.insert(FREIGHTS_TABLE, payload)
        freight = Freight.from_row(row)
        self.logger.info(
            "freight_created",
            freight_id=freight.id,
            driver_id=freight.driver_id,
            total_value=payload["total_value"],
        )
        self.record_operation("create", FREIGHTS_TABLE, freight.id, payload, start_time, time())

        if data.driver_id:
            self.drivers.set_status(data.driver_id, data.status.driver_status())
        return freight

    def update(self, freight_id: str, data: FreightInput) -> Freight:
        """
        Overwrite a freight's form fields.

        A driver taken off the freight becomes available; the driver now on
        it follows the freight status.
        """
        start_time = time()
        previous = self.get(freight_id)
        payload = data.to_row(self.pricing)
        row = self.store.update(FREIGHTS_TABLE, freight_id, payload)
        self.logger.info("freight_updated", freight_id=freight_id, total_value=payload["total_value"])
        self.record_operation("update", FREIGHTS_TABLE, freight_id, payload, start_time, time())

        if previous.driver_id and previous.driver_id != data.driver_id:
            self.drivers.set_status(previous.driver_id, DriverStatus.AVAILABLE)
        if data.driver_id:
            self.drivers.set_status(data.driver_id, data.status.driver_status())
        return Freight.from_row(row)

    def change_status(self, freight_id: str, status: FreightStatus) -> Freight:
        """Move a freight to a new status and sync its driver."""
        start_time = time()
        row = self.store.update(FREIGHTS_TABLE, freight_id, {"status": status.value})
        freight = Freight.from_row(row)
        self.logger.info("freight_status_changed", freight_id=freight_id, status=status.value)
        self.record_operation(
            "status_change", FREIGHTS_TABLE, freight_id, {"status": status.value}, start_time, time()
        )

        if freight.driver_id:
            self.drivers.set_status(freight.driver_id, status.driver_status())
        return freight

    def set_payment(
        self,
        freight_id: str,
        advance_paid: Optional[bool] = None,
        balance_paid: Optional[bool] = None,
    ) -> Freight:
        """Set either payment flag; the other flag and the status are untouched."""
        patch: dict[str, Any] = {}
        if advance_paid is not None:
            patch["advance_paid"] = advance_paid
        if balance_paid is not None:
            patch["balance_paid"] = balance_paid
        if not patch:
            raise ValueError("nothing to update: pass advance_paid and/or balance_paid")

        start_time = time()
        row = self.store.update(FREIGHTS_TABLE, freight_id, patch)
        self.logger.info("freight_payment_updated", freight_id=freight_id, **patch)
        self.record_operation("payment", FREIGHTS_TABLE, freight_id, patch, start_time, time())
        return Freight.from_row(row)

    def delete(self, freight_id: str) -> None:
        """Delete a freight, freeing its driver first."""
        start_time = time()
        freight = self.get(freight_id)
        if freight.driver_id:
            self.drivers.set_status(freight.driver_id, DriverStatus.AVAILABLE)

        self.store.delete(FREIGHTS_TABLE, freight_id)
        self.logger.info("freight_deleted", freight_id=freight_id)
        self.record_operation("delete", FREIGHTS_TABLE, freight_id, {}, start_time, time())

    def export_csv(self, freights: list[Freight], out: TextIO) -> int:
        """
        Write freights as CSV (Excel-friendly, with BOM).

        Args:
            freights: Rows to export, usually FreightTableView.freights
            out: Text stream opened with newline=""

        Returns:
            Number of freight rows written
        """
        out.write("\ufeff")
        writer = csv.writer(out)
        writer.writerow(CSV_HEADER)

        for f in freights:
            advance, balance = f.payment_split(self.pricing)
            writer.writerow(
                [
                    format_short_date(f.date),
                    f.product,
                    f.license_plate or "",
                    f.driver_name or "",
                    f.origin or "",
                    f.destination,
                    f.invoice_number or "",
                    f"{f.weight_loaded:.3f}",
                    f"{f.computed_sacks:.2f}",
                    f"{f.unit_price:.2f}",
                    f"{f.computed_total:.2f}",
                    f"{advance:.2f}",
                    f"{balance:.2f}",
                    f.status.label if f.status else "",
                    "sim" if f.advance_paid else "não",
                    "sim" if f.balance_paid else "não",
                    format_short_date(f.discharge_date) if f.discharge_date else "",
                ]
            )

        self.logger.info("freights_exported", count=len(freights))
        return len(freights)
