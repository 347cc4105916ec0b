"""
Client-side filtering and sorting for the freight table.

The table holds every freight fetched from the backend; filters narrow it
in memory and a single sort key orders it.
"""

from datetime import date
from enum import Enum
from typing import Any, Callable, Iterable, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from freightboard.data.models.freight import Freight, FreightStatus, Product
from freightboard.utils.date_picker import DateRange

Predicate = Callable[[Freight], bool]


class FreightFilters(BaseModel):
    """Filters applied to the freight table. Empty fields do not filter."""

    search: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    statuses: list[FreightStatus] = Field(default_factory=list)
    product: Optional[Product] = None
    driver_id: Optional[str] = None

    @field_validator("start_date", "end_date", "product", "driver_id", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return None if v == "" else v

    @model_validator(mode="after")
    def check_range(self) -> "FreightFilters":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start date must not be after end date")
        return self

    @property
    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def active_filter_count(self) -> int:
        """Number of modal filters set (search excluded), for the filter badge."""
        return sum(
            [
                bool(self.start_date or self.end_date),
                bool(self.statuses),
                self.product is not None,
                self.driver_id is not None,
            ]
        )

    def toggle_status(self, status: FreightStatus) -> "FreightFilters":
        """Add the status to the set, or remove it if already there."""
        if status in self.statuses:
            statuses = [s for s in self.statuses if s != status]
        else:
            statuses = [*self.statuses, status]
        return self.model_copy(update={"statuses": statuses})

    def clear(self) -> "FreightFilters":
        """Reset the modal filters, keeping the search text."""
        return FreightFilters(search=self.search)

    def predicates(self) -> list[Predicate]:
        """One predicate per active filter; a freight must pass all of them."""
        checks: list[Predicate] = []

        term = self.search.strip().lower()
        if term:
            checks.append(lambda f: _matches_search(f, term))

        date_range = self.date_range
        if not date_range.is_open:
            checks.append(lambda f: date_range.contains(f.date))

        if self.statuses:
            wanted = set(self.statuses)
            checks.append(lambda f: f.status in wanted)

        if self.product is not None:
            product = self.product.value
            checks.append(lambda f: f.product == product)

        if self.driver_id is not None:
            driver_id = self.driver_id
            checks.append(lambda f: f.driver_id == driver_id)

        return checks


def _matches_search(freight: Freight, term: str) -> bool:
    haystack = (freight.driver_name, freight.license_plate, freight.destination)
    return any(term in value.lower() for value in haystack if value)


def apply_filters(freights: Iterable[Freight], filters: FreightFilters) -> list[Freight]:
    """Keep the freights that satisfy every active filter."""
    checks = filters.predicates()
    return [f for f in freights if all(check(f) for check in checks)]


class SortKey(str, Enum):
    """Sortable freight table columns."""

    DATE = "date"
    DISCHARGE_DATE = "discharge_date"
    PRODUCT = "product"
    LICENSE_PLATE = "license_plate"
    DRIVER = "driver"
    DESTINATION = "destination"
    WEIGHT = "weight"
    UNIT_PRICE = "unit_price"
    TOTAL = "total"
    STATUS = "status"


_SORT_VALUES: dict[SortKey, Callable[[Freight], Any]] = {
    SortKey.DATE: lambda f: f.date,
    SortKey.DISCHARGE_DATE: lambda f: f.discharge_date,
    SortKey.PRODUCT: lambda f: f.product.lower(),
    SortKey.LICENSE_PLATE: lambda f: f.license_plate.lower() if f.license_plate else None,
    SortKey.DRIVER: lambda f: f.driver_name.lower() if f.driver_name else None,
    SortKey.DESTINATION: lambda f: f.destination.lower(),
    SortKey.WEIGHT: lambda f: f.weight_loaded,
    SortKey.UNIT_PRICE: lambda f: f.unit_price,
    SortKey.TOTAL: lambda f: f.computed_total,
    SortKey.STATUS: lambda f: f.status.value if f.status else None,
}


class SortState(BaseModel):
    """Current sort column and direction. Defaults to newest load date first."""

    key: SortKey = SortKey.DATE
    descending: bool = True

    def toggle(self, key: SortKey) -> "SortState":
        """Clicking the active column flips direction; a new column starts ascending."""
        if key == self.key:
            return SortState(key=key, descending=not self.descending)
        return SortState(key=key, descending=False)


def sort_freights(freights: Iterable[Freight], sort: SortState) -> list[Freight]:
    """Order by the sort key; rows missing the value go last in either direction."""
    value_of = _SORT_VALUES[sort.key]
    freights = list(freights)
    present = [f for f in freights if value_of(f) is not None]
    missing = [f for f in freights if value_of(f) is None]
    present.sort(key=value_of, reverse=sort.descending)
    return present + missing
