"""
Services for the freight board screens.

This module contains one service per screen:
- Drivers: Registration, ratings and availability
- Freights: Trip registration, lifecycle, filtering and export
- Finance: Commission and receivables
- Dashboard: Overview counters
"""

from .base import BaseService, OperationRecord
from .dashboard import DashboardService, DashboardSummary
from .driver import DriverService
from .finance import FinanceService, FinanceSummary
from .freight import FreightService, FreightTableView
from .freight_filters import FreightFilters, SortKey, SortState, apply_filters, sort_freights

__all__ = [
    "BaseService",
    "OperationRecord",
    "DriverService",
    "FreightService",
    "FreightTableView",
    "FreightFilters",
    "SortKey",
    "SortState",
    "apply_filters",
    "sort_freights",
    "FinanceService",
    "FinanceSummary",
    "DashboardService",
    "DashboardSummary",
]
