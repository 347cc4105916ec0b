"""
Pydantic data models for the freight board.

Core models:
- Driver: Transport operator and availability
- Freight: A single transport trip with weight and pricing
- Pricing: Derived values (sacks, total, advance/balance, commission)
"""

from .driver import Driver, DriverInput, DriverStatus
from .freight import Freight, FreightInput, FreightStatus, Product
from .pricing import FreightCalculation, commission_for, round_money, sacks_for, split_payment, total_for

__all__ = [
    "Driver",
    "DriverInput",
    "DriverStatus",
    "Freight",
    "FreightInput",
    "FreightStatus",
    "Product",
    "FreightCalculation",
    "commission_for",
    "round_money",
    "sacks_for",
    "split_payment",
    "total_for",
]
