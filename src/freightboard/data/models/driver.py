"""
Driver data model - a transport operator assigned to freights.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class DriverStatus(str, Enum):
    """Driver availability. Values are the strings stored remotely."""

    AVAILABLE = "Disponível"
    TRAVELING = "Em Viagem"
    RESERVED = "Reservado"
    UNAVAILABLE = "Indisponível"


class DriverInput(BaseModel):
    """Fields accepted by the driver form."""

    name: str = Field(..., min_length=1, description="Driver full name")
    phone: Optional[str] = Field(None, description="Contact phone")
    license_plate: Optional[str] = Field(None, description="Truck license plate")
    status: DriverStatus = Field(DriverStatus.AVAILABLE, description="Current availability")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be blank")
        return v

    @field_validator("license_plate")
    @classmethod
    def normalize_plate(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().upper()
        return v or None

    def to_row(self) -> dict[str, Any]:
        """Serialize to the remote column layout."""
        return self.model_dump(mode="json")


class Driver(BaseModel):
    """A driver row as fetched from the `drivers` table."""

    id: str
    name: str
    phone: Optional[str] = None
    license_plate: Optional[str] = None
    status: Optional[DriverStatus] = None
    rating: float = Field(5.0, ge=0, le=5)
    created_at: Optional[datetime] = None
    user_id: Optional[str] = None

    # Computed client-side on the drivers list
    trips: int = 0

    @field_validator("rating", mode="before")
    @classmethod
    def default_rating(cls, v: Any) -> Any:
        return 5.0 if v is None else v

    @field_validator("status", mode="before")
    @classmethod
    def unknown_status(cls, v: Any) -> Any:
        # Rows written by older clients may carry free text
        if v is None or v in {s.value for s in DriverStatus}:
            return v
        return None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Driver":
        """Build from a remote row, reading an embedded `freights(count)` if present."""
        data = dict(row)
        embedded = data.pop("freights", None)
        if isinstance(embedded, list) and embedded and isinstance(embedded[0], dict):
            data.setdefault("trips", embedded[0].get("count", 0) or 0)
        return cls(**data)

    def matches(self, term: str) -> bool:
        """Case-insensitive search on name or license plate."""
        term = term.strip().lower()
        if not term:
            return True
        return term in self.name.lower() or term in (self.license_plate or "").lower()

    def to_input(self) -> DriverInput:
        """Form values for editing this driver."""
        return DriverInput(
            name=self.name,
            phone=self.phone,
            license_plate=self.license_plate,
            status=self.status or DriverStatus.AVAILABLE,
        )

    def __str__(self) -> str:
        """String representation."""
        plate = self.license_plate or "no plate"
        return f"{self.name} ({plate})"
