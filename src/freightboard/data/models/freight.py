"""
Freight data model - a single transport trip.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationInfo, computed_field, field_validator

from freightboard.core.config import PricingConfig
from freightboard.data.models.driver import Driver, DriverStatus
from freightboard.data.models.pricing import (
    FreightCalculation,
    commission_for,
    sacks_for,
    split_payment,
    total_for,
)


class FreightStatus(str, Enum):
    """Freight lifecycle status. Values are the strings stored remotely."""

    SCHEDULED = "AGENDADO"
    IN_TRANSIT = "EM_TRANSITO"
    UNLOADED = "DESCARREGADO"
    PAID = "PAGO"
    LATE = "ATRASADO"

    @property
    def label(self) -> str:
        """Display label, e.g. 'EM TRANSITO'."""
        return self.value.replace("_", " ")

    def driver_status(self) -> DriverStatus:
        """Status the assigned driver takes while the freight is in this state."""
        if self in (FreightStatus.PAID, FreightStatus.UNLOADED):
            return DriverStatus.AVAILABLE
        return DriverStatus.TRAVELING


class Product(str, Enum):
    """Grain carried."""

    SOY = "Soja"
    CORN = "Milho"
    SORGHUM = "Sorgo"


class FreightInput(BaseModel):
    """Fields accepted by the freight form."""

    date: dt.date = Field(..., description="Load date")
    discharge_date: Optional[dt.date] = Field(None, description="Discharge date")
    product: Product = Field(..., description="Grain carried")
    origin: Optional[str] = Field(None, description="Loading city/farm")
    destination: str = Field(..., min_length=1, description="Delivery city/buyer")
    invoice_number: Optional[str] = Field(None, description="Invoice (NF) number")
    driver_id: Optional[str] = Field(None, description="Assigned driver")

    weight_loaded: Decimal = Field(..., ge=0, description="Loaded weight in tons")
    unit_price: Decimal = Field(..., ge=0, description="Price per ton")

    status: FreightStatus = Field(FreightStatus.IN_TRANSIT, description="Lifecycle status")
    advance_paid: bool = Field(False, description="70% advance received")
    balance_paid: bool = Field(False, description="30% balance received")

    @field_validator("driver_id", "origin", "invoice_number", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("discharge_date")
    @classmethod
    def discharge_after_load(cls, v: Optional[dt.date], info: ValidationInfo) -> Optional[dt.date]:
        loaded = info.data.get("date")
        if v is not None and loaded is not None and v < loaded:
            raise ValueError("discharge date cannot precede load date")
        return v

    def calculate(self, pricing: Optional[PricingConfig] = None) -> FreightCalculation:
        """Derived values for the current weight/price."""
        return FreightCalculation.compute(self.weight_loaded, self.unit_price, pricing)

    def to_row(self, pricing: Optional[PricingConfig] = None) -> dict[str, Any]:
        """Serialize to the remote column layout with derived values filled in."""
        pricing = pricing or PricingConfig()
        calc = self.calculate(pricing)
        row = self.model_dump(mode="json")
        row.update(
            weight_loaded=float(calc.weight_loaded),
            unit_price=float(calc.unit_price),
            total_value=float(calc.total_value),
            sacks_amount=float(round(calc.sacks_amount, 2)),
            weight_sack=float(pricing.sack_weight_kg),
        )
        return row


class Freight(BaseModel):
    """
    A freight row as fetched from the `freights` table.

    `total_value` and `sacks_amount` are stored with the row but the
    properties below always recompute from weight and price.
    """

    # Identification
    id: str
    invoice_number: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[dt.datetime] = None

    # Timing
    date: dt.date
    discharge_date: Optional[dt.date] = None

    # Load details
    product: str
    origin: Optional[str] = None
    destination: str
    weight_loaded: Decimal = Field(Decimal("0"), ge=0)
    weight_sack: Optional[Decimal] = Decimal("60")

    # Financial
    unit_price: Decimal = Field(Decimal("0"), ge=0)
    total_value: Optional[Decimal] = None
    sacks_amount: Optional[Decimal] = None

    # Status
    status: Optional[FreightStatus] = None
    advance_paid: bool = False
    balance_paid: bool = False

    # Driver
    driver_id: Optional[str] = None
    driver: Optional[Driver] = None

    @field_validator("advance_paid", "balance_paid", mode="before")
    @classmethod
    def null_flags(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def unknown_status(cls, v: Any) -> Any:
        if v is None or v in {s.value for s in FreightStatus}:
            return v
        return None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Freight":
        """Build from a remote row, reading the embedded `drivers(*)` join if present."""
        data = dict(row)
        embedded = data.pop("drivers", None)
        if isinstance(embedded, dict):
            data["driver"] = Driver.from_row(embedded)
        return cls(**data)

    @computed_field
    @property
    def computed_total(self) -> Decimal:
        """Total value recomputed from weight and price."""
        return total_for(self.weight_loaded, self.unit_price)

    @computed_field
    @property
    def computed_sacks(self) -> Decimal:
        """Sack quantity recomputed from weight, using the sack weight stored with the row."""
        if self.weight_sack:
            return sacks_for(self.weight_loaded, PricingConfig(sack_weight_kg=self.weight_sack))
        return sacks_for(self.weight_loaded)

    @property
    def driver_name(self) -> Optional[str]:
        return self.driver.name if self.driver else None

    @property
    def license_plate(self) -> Optional[str]:
        return self.driver.license_plate if self.driver else None

    @property
    def is_pending(self) -> bool:
        """Not yet paid in full."""
        return self.status is not FreightStatus.PAID

    def payment_split(self, pricing: Optional[PricingConfig] = None) -> tuple[Decimal, Decimal]:
        """(advance, balance) for this freight."""
        return split_payment(self.computed_total, pricing)

    def commission(self, pricing: Optional[PricingConfig] = None) -> Decimal:
        """Operator commission on the loaded tonnage."""
        return commission_for(self.weight_loaded, pricing)

    def to_input(self) -> FreightInput:
        """Form values for editing this freight."""
        return FreightInput(
            date=self.date,
            discharge_date=self.discharge_date,
            product=Product(self.product),
            origin=self.origin,
            destination=self.destination,
            invoice_number=self.invoice_number,
            driver_id=self.driver_id,
            weight_loaded=self.weight_loaded,
            unit_price=self.unit_price,
            status=self.status or FreightStatus.IN_TRANSIT,
            advance_paid=self.advance_paid,
            balance_paid=self.balance_paid,
        )

    def __str__(self) -> str:
        """String representation."""
        route = f"{self.origin} → {self.destination}" if self.origin else self.destination
        return f"{self.date.isoformat()} {self.product} {route}"


