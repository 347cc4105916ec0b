"""
Dashboard Service - overview counters and recent trips.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from freightboard.data.models.freight import Freight
from freightboard.data.store import DRIVERS_TABLE, FREIGHTS_TABLE
from freightboard.services.base import BaseService
from freightboard.services.freight import FREIGHT_WITH_DRIVER

RECENT_LIMIT = 5


class DashboardSummary(BaseModel):
    """Counters and recent trips for the landing screen."""

    generated_at: datetime
    total_trips: int
    gross_revenue: Decimal
    drivers_count: int
    pending_count: int
    recent_freights: list[Freight]


class DashboardService(BaseService):
    """Dashboard Service backing the landing screen."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the dashboard service."""
        super().__init__(service_name="dashboard", **kwargs)

    def execute(self) -> DashboardSummary:
        """Fetch freights and the driver count and build the overview."""
        rows = self.store.select(
            FREIGHTS_TABLE, columns=FREIGHT_WITH_DRIVER, order_by="date", descending=True
        )
        freights = [Freight.from_row(row) for row in rows]
        drivers_count = self.store.count(DRIVERS_TABLE)

        summary = DashboardSummary(
            generated_at=datetime.now(),
            total_trips=len(freights),
            gross_revenue=sum((f.computed_total for f in freights), Decimal("0")),
            drivers_count=drivers_count,
            pending_count=sum(1 for f in freights if f.is_pending),
            recent_freights=freights[:RECENT_LIMIT],
        )

        self.logger.info(
            "dashboard_built",
            trips=summary.total_trips,
            drivers=summary.drivers_count,
            pending=summary.pending_count,
        )
        return summary
