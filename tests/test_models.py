"""Tests for the Driver and Freight models."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from freightboard.data.models import (
    Driver,
    DriverInput,
    DriverStatus,
    Freight,
    FreightInput,
    FreightStatus,
    Product,
)


class TestDriver:
    def test_from_row_reads_trip_count(self):
        driver = Driver.from_row(
            {"id": "d1", "name": "João", "status": "Disponível", "freights": [{"count": 3}]}
        )
        assert driver.trips == 3
        assert driver.status is DriverStatus.AVAILABLE

    def test_missing_rating_defaults_to_five(self):
        assert Driver.from_row({"id": "d1", "name": "João", "rating": None}).rating == 5.0

    def test_unknown_status_becomes_none(self):
        assert Driver.from_row({"id": "d1", "name": "João", "status": "???"}).status is None

    def test_rating_out_of_range(self):
        with pytest.raises(ValidationError):
            Driver(id="d1", name="João", rating=6)

    def test_matches_name_or_plate(self):
        driver = Driver(id="d1", name="João Silva", license_plate="ABC1D23")
        assert driver.matches("joão")
        assert driver.matches("abc1")
        assert driver.matches("")
        assert not driver.matches("maria")


class TestDriverInput:
    def test_defaults_to_available(self):
        assert DriverInput(name="João").status is DriverStatus.AVAILABLE

    def test_plate_normalized(self):
        assert DriverInput(name="João", license_plate=" abc1d23 ").license_plate == "ABC1D23"

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            DriverInput(name="   ")

    def test_to_row_uses_stored_status_values(self):
        assert DriverInput(name="João").to_row()["status"] == "Disponível"


class TestFreightStatus:
    @pytest.mark.parametrize(
        "status, expected",
        [
            (FreightStatus.PAID, DriverStatus.AVAILABLE),
            (FreightStatus.UNLOADED, DriverStatus.AVAILABLE),
            (FreightStatus.IN_TRANSIT, DriverStatus.TRAVELING),
            (FreightStatus.LATE, DriverStatus.TRAVELING),
            (FreightStatus.SCHEDULED, DriverStatus.TRAVELING),
        ],
    )
    def test_driver_status_follows_freight(self, status, expected):
        assert status.driver_status() is expected

    def test_label(self):
        assert FreightStatus.IN_TRANSIT.label == "EM TRANSITO"


class TestFreightInput:
    def _input(self, **overrides):
        data = {
            "date": date(2025, 3, 10),
            "product": Product.SOY,
            "destination": "Santos",
            "weight_loaded": "30",
            "unit_price": "150",
        }
        data.update(overrides)
        return FreightInput(**data)

    def test_to_row_fills_derived_values(self):
        row = self._input().to_row()
        assert row["total_value"] == 4500.0
        assert row["sacks_amount"] == 500.0
        assert row["weight_sack"] == 60.0
        assert row["status"] == "EM_TRANSITO"
        assert row["product"] == "Soja"
        assert row["date"] == "2025-03-10"

    def test_sacks_rounded_for_storage(self):
        row = self._input(weight_loaded="1").to_row()
        assert row["sacks_amount"] == 16.67

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            self._input(weight_loaded="-1")

    def test_discharge_before_load_rejected(self):
        with pytest.raises(ValidationError, match="discharge date"):
            self._input(discharge_date=date(2025, 3, 1))

    def test_blank_driver_is_none(self):
        assert self._input(driver_id="").driver_id is None

    def test_unknown_product_rejected(self):
        with pytest.raises(ValidationError):
            self._input(product="Trigo")


class TestFreight:
    def _row(self, **overrides):
        row = {
            "id": "f1",
            "date": "2025-03-10",
            "product": "Soja",
            "destination": "Santos",
            "weight_loaded": 30,
            "unit_price": 150,
            "total_value": 1,
            "status": "EM_TRANSITO",
            "advance_paid": None,
            "balance_paid": None,
        }
        row.update(overrides)
        return row

    def test_from_row_with_driver_join(self):
        freight = Freight.from_row(
            self._row(driver_id="d1", drivers={"id": "d1", "name": "João", "license_plate": "ABC1D23"})
        )
        assert freight.driver_name == "João"
        assert freight.license_plate == "ABC1D23"

    def test_from_row_without_driver(self):
        freight = Freight.from_row(self._row(drivers=None))
        assert freight.driver is None
        assert freight.driver_name is None

    def test_derived_values_ignore_stored_total(self):
        freight = Freight.from_row(self._row())
        assert freight.computed_total == Decimal("4500.00")
        assert freight.computed_sacks == Decimal("500")

    def test_null_payment_flags_are_false(self):
        freight = Freight.from_row(self._row())
        assert freight.advance_paid is False
        assert freight.balance_paid is False

    def test_payment_split(self):
        assert Freight.from_row(self._row()).payment_split() == (Decimal("3150.00"), Decimal("1350.00"))

    def test_pending_unless_paid(self):
        assert Freight.from_row(self._row()).is_pending
        assert not Freight.from_row(self._row(status="PAGO")).is_pending

    def test_to_input_round_trip_keeps_fields(self):
        freight = Freight.from_row(self._row(origin="Rio Verde", invoice_number="123"))
        data = freight.to_input()
        assert data.product is Product.SOY
        assert data.origin == "Rio Verde"
        assert data.weight_loaded == Decimal("30")

    def test_sacks_use_stored_sack_weight(self):
        freight = Freight.from_row(self._row(weight_loaded=5, weight_sack=50))
        assert freight.computed_sacks == Decimal("100")

    def test_sacks_default_to_sixty_kg_when_weight_sack_missing(self):
        assert Freight.from_row(self._row(weight_sack=None)).computed_sacks == Decimal("500")


class TestDriverToInput:
    def test_keeps_stored_fields(self):
        driver = Driver(id="d1", name="João", phone="64 9999", license_plate="ABC1D23", status="Em Viagem")
        data = driver.to_input()
        assert data.license_plate == "ABC1D23"
        assert data.phone == "64 9999"
        assert data.status is DriverStatus.TRAVELING
