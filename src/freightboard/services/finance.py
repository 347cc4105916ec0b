"""
Finance Service - commission and receivables summary.

This service:
- Calculates the operator's commission on transported tonnage
- Breaks the current month down by load day
- Tracks advance and balance payments received vs. pending
- Lists the latest movements
"""

import calendar
from datetime import date, datetime
from decimal import Decimal
from time import time
from typing import Any, Optional

from pydantic import BaseModel, Field

from freightboard.data.models.freight import Freight
from freightboard.data.models.pricing import round_money
from freightboard.data.store import FREIGHTS_TABLE
from freightboard.services.base import BaseService

FINANCE_COLUMNS = (
    "id, date, product, origin, destination, status, weight_loaded, unit_price, "
    "advance_paid, balance_paid, driver_id, drivers(id, name)"
)
RECENT_LIMIT = 5


class DailyStat(BaseModel):
    """Commission earned on one day of the month."""

    day: int
    value: Decimal = Decimal("0")
    count: int = 0


class Receivables(BaseModel):
    """Advance/balance amounts received and still owed."""

    advance_received: Decimal = Decimal("0")
    advance_pending: Decimal = Decimal("0")
    balance_received: Decimal = Decimal("0")
    balance_pending: Decimal = Decimal("0")

    @property
    def total_received(self) -> Decimal:
        return self.advance_received + self.balance_received

    @property
    def total_pending(self) -> Decimal:
        return self.advance_pending + self.balance_pending


class FinanceSummary(BaseModel):
    """Everything shown on the finance screen."""

    generated_at: datetime
    reference_date: date

    # Commission
    commission_per_ton: Decimal
    total_weight: Decimal
    total_commission: Decimal
    total_trips: int

    # Current month
    daily_stats: list[DailyStat]
    max_daily_value: Decimal
    best_day: DailyStat
    daily_average: Decimal

    # Payments
    receivables: Receivables

    recent: list[Freight] = Field(default_factory=list)
    execution_time_seconds: float = 0.0

    @property
    def active_days(self) -> list[DailyStat]:
        """Days with activity, most recent first."""
        return sorted((s for s in self.daily_stats if s.value > 0), key=lambda s: s.day, reverse=True)


class FinanceService(BaseService):
    """Finance Service backing the finance screen."""

    def __init__(self, **kwargs: Any) -> None:
        """Initialize the finance service."""
        super().__init__(service_name="finance", **kwargs)

    def execute(self, today: Optional[date] = None) -> FinanceSummary:
        """
        Build the finance summary.

        Args:
            today: Reference day for the monthly breakdown (defaults to today)

        Returns:
            FinanceSummary for all freights on record
        """
        start_time = time()
        today = today or date.today()

        rows = self.store.select(FREIGHTS_TABLE, columns=FINANCE_COLUMNS, order_by="date", descending=True)
        freights = [Freight.from_row(row) for row in rows]

        self.logger.info("calculating_finance_summary", freights=len(freights), month=today.strftime("%Y-%m"))

        summary = self.summarize(freights, today)
        summary.execution_time_seconds = time() - start_time

        self.logger.info(
            "finance_summary_calculated",
            total_commission=str(summary.total_commission),
            best_day=summary.best_day.day,
            pending=str(summary.receivables.total_pending),
        )
        return summary

    def summarize(self, freights: list[Freight], today: date) -> FinanceSummary:
        """Aggregate already-fetched freights (expected newest first)."""
        total_weight = sum((f.weight_loaded for f in freights), Decimal("0"))
        total_commission = round_money(total_weight * self.pricing.commission_per_ton)

        daily_stats = self._daily_stats(freights, today)
        max_daily_value = max([s.value for s in daily_stats] + [Decimal("1")])

        return FinanceSummary(
            generated_at=datetime.now(),
            reference_date=today,
            commission_per_ton=self.pricing.commission_per_ton,
            total_weight=total_weight,
            total_commission=total_commission,
            total_trips=len(freights),
            daily_stats=daily_stats,
            max_daily_value=max_daily_value,
            best_day=self._best_day(daily_stats),
            daily_average=round_money(total_commission / today.day),
            receivables=self._receivables(freights),
            recent=freights[:RECENT_LIMIT],
        )

    def _daily_stats(self, freights: list[Freight], today: date) -> list[DailyStat]:
        """Commission per load day for every day of today's month."""
        days_in_month = calendar.monthrange(today.year, today.month)[1]
        stats = [DailyStat(day=i + 1) for i in range(days_in_month)]

        for freight in freights:
            if freight.date.year != today.year or freight.date.month != today.month:
                continue
            stat = stats[freight.date.day - 1]
            stat.value += freight.commission(self.pricing)
            stat.count += 1

        return stats

    def _best_day(self, stats: list[DailyStat]) -> DailyStat:
        """Highest-earning day; the later day wins a tie. Day 0 when the month is empty."""
        best = DailyStat(day=0)
        for stat in stats:
            if stat.value > 0 and stat.value >= best.value:
                best = stat
        return best

    def _receivables(self, freights: list[Freight]) -> Receivables:
        """Split each freight's total into advance/balance and bucket by its flags."""
        receivables = Receivables()
        for freight in freights:
            advance, balance = freight.payment_split(self.pricing)
            if freight.advance_paid:
                receivables.advance_received += advance
            else:
                receivables.advance_pending += advance
            if freight.balance_paid:
                receivables.balance_received += balance
            else:
                receivables.balance_pending += balance
        return receivables
