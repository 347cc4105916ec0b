"""Tests for freight table filtering and sorting."""

from datetime import date
from decimal import Decimal
from itertools import permutations

import pytest
from pydantic import ValidationError

from freightboard.data.models import Driver, Freight, FreightStatus, Product
from freightboard.services.freight_filters import (
    FreightFilters,
    SortKey,
    SortState,
    apply_filters,
    sort_freights,
)

JOAO = Driver(id="d1", name="João Silva", license_plate="ABC1D23")
MARIA = Driver(id="d2", name="Maria Souza", license_plate="XYZ9K88")


def make_freight(fid, day, driver=None, **kwargs):
    data = {
        "id": fid,
        "date": day,
        "product": "Soja",
        "destination": "Santos",
        "weight_loaded": Decimal("30"),
        "unit_price": Decimal("150"),
        "status": FreightStatus.IN_TRANSIT,
    }
    data.update(kwargs)
    if driver is not None:
        data.update(driver=driver, driver_id=driver.id)
    return Freight(**data)


@pytest.fixture
def freights():
    return [
        make_freight("f1", date(2025, 3, 10), JOAO),
        make_freight(
            "f2",
            date(2025, 3, 12),
            MARIA,
            product="Milho",
            destination="Paranaguá",
            weight_loaded=Decimal("40"),
            unit_price=Decimal("120"),
            status=FreightStatus.PAID,
            discharge_date=date(2025, 3, 14),
        ),
        make_freight(
            "f3",
            date(2025, 3, 12),
            product="Sorgo",
            destination="Uberlândia",
            weight_loaded=Decimal("10"),
            unit_price=Decimal("100"),
            status=FreightStatus.SCHEDULED,
        ),
        make_freight("f4", date(2025, 2, 20), JOAO, status=FreightStatus.UNLOADED),
    ]


def ids(freights):
    return [f.id for f in freights]


class TestFreightFilters:
    """Test filter narrowing of the freight table."""

    def test_no_filters_keeps_everything(self, freights):
        assert ids(apply_filters(freights, FreightFilters())) == ["f1", "f2", "f3", "f4"]

    def test_search_matches_driver_name(self, freights):
        assert ids(apply_filters(freights, FreightFilters(search="joão"))) == ["f1", "f4"]

    def test_search_matches_plate(self, freights):
        assert ids(apply_filters(freights, FreightFilters(search="xyz9"))) == ["f2"]

    def test_search_matches_destination(self, freights):
        assert ids(apply_filters(freights, FreightFilters(search="UBERL"))) == ["f3"]

    def test_search_does_not_match_product(self, freights):
        assert apply_filters(freights, FreightFilters(search="sorgo")) == []

    def test_date_range_is_inclusive(self, freights):
        filters = FreightFilters(start_date=date(2025, 3, 10), end_date=date(2025, 3, 12))
        assert ids(apply_filters(freights, filters)) == ["f1", "f2", "f3"]

    def test_open_ended_range(self, freights):
        assert ids(apply_filters(freights, FreightFilters(end_date=date(2025, 3, 1)))) == ["f4"]
        assert ids(apply_filters(freights, FreightFilters(start_date=date(2025, 3, 11)))) == ["f2", "f3"]

    def test_status_set(self, freights):
        filters = FreightFilters(statuses=[FreightStatus.PAID, FreightStatus.SCHEDULED])
        assert ids(apply_filters(freights, filters)) == ["f2", "f3"]

    def test_product(self, freights):
        assert ids(apply_filters(freights, FreightFilters(product=Product.CORN))) == ["f2"]

    def test_driver(self, freights):
        assert ids(apply_filters(freights, FreightFilters(driver_id="d1"))) == ["f1", "f4"]

    def test_filters_are_conjunctive(self, freights):
        filters = FreightFilters(
            search="santos",
            driver_id="d1",
            statuses=[FreightStatus.UNLOADED],
        )
        assert ids(apply_filters(freights, filters)) == ["f4"]

    def test_filter_order_does_not_matter(self, freights):
        """Applying one filter at a time in any order gives the same rows."""
        singles = [
            FreightFilters(search="santos"),
            FreightFilters(start_date=date(2025, 3, 1)),
            FreightFilters(product=Product.SOY),
        ]
        results = set()
        for order in permutations(singles):
            rows = freights
            for filters in order:
                rows = apply_filters(rows, filters)
            results.add(tuple(ids(rows)))
        assert results == {("f1",)}

    def test_blank_values_do_not_filter(self, freights):
        filters = FreightFilters(start_date="", end_date="", product="", driver_id="")
        assert len(apply_filters(freights, filters)) == 4

    def test_inverted_range_rejected(self):
        with pytest.raises(ValidationError):
            FreightFilters(start_date=date(2025, 3, 12), end_date=date(2025, 3, 10))

    def test_active_filter_count(self):
        assert FreightFilters(search="x").active_filter_count == 0
        filters = FreightFilters(
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 31),
            statuses=[FreightStatus.PAID],
            product=Product.SOY,
        )
        assert filters.active_filter_count == 3

    def test_toggle_status(self):
        filters = FreightFilters().toggle_status(FreightStatus.PAID)
        assert filters.statuses == [FreightStatus.PAID]
        assert filters.toggle_status(FreightStatus.PAID).statuses == []

    def test_clear_keeps_search(self):
        filters = FreightFilters(search="santos", product=Product.SOY).clear()
        assert filters.search == "santos"
        assert filters.product is None


class TestSortState:
    def test_default_is_newest_first(self):
        state = SortState()
        assert state.key is SortKey.DATE
        assert state.descending

    def test_same_key_flips_direction(self):
        assert not SortState().toggle(SortKey.DATE).descending

    def test_new_key_starts_ascending(self):
        state = SortState(key=SortKey.TOTAL, descending=True).toggle(SortKey.WEIGHT)
        assert state.key is SortKey.WEIGHT
        assert not state.descending


class TestSortFreights:
    def test_date_descending(self, freights):
        assert ids(sort_freights(freights, SortState()))[-1] == "f4"
        assert ids(sort_freights(freights, SortState()))[0] in {"f2", "f3"}

    def test_total_ascending(self, freights):
        assert ids(sort_freights(freights, SortState(key=SortKey.TOTAL, descending=False))) == [
            "f3",
            "f1",
            "f4",
            "f2",
        ]

    def test_destination_case_insensitive(self, freights):
        result = ids(sort_freights(freights, SortState(key=SortKey.DESTINATION, descending=False)))
        assert result[0] == "f2"
        assert result[-1] == "f3"

    @pytest.mark.parametrize("descending", [False, True])
    def test_missing_driver_goes_last(self, freights, descending):
        result = ids(sort_freights(freights, SortState(key=SortKey.DRIVER, descending=descending)))
        assert result[-1] == "f3"

    @pytest.mark.parametrize("descending", [False, True])
    def test_missing_discharge_date_goes_last(self, freights, descending):
        result = ids(sort_freights(freights, SortState(key=SortKey.DISCHARGE_DATE, descending=descending)))
        assert result[0] == "f2"

    def test_accepts_generator(self, freights):
        assert len(sort_freights((f for f in freights), SortState())) == 4
