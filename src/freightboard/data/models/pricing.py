"""
Freight arithmetic.

Weights are in tons, prices per ton, money in Decimal rounded to cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel

from freightboard.core.config import PricingConfig

CENTS = Decimal("0.01")
KG_PER_TON = Decimal("1000")

Number = Union[Decimal, int, float, str]

_DEFAULT_PRICING = PricingConfig()


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convert a form/row value to Decimal; None counts as zero."""
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    # str() keeps floats like 0.1 from dragging binary noise along
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"not a number: {value!r}") from e


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half up."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def sacks_for(tons: Number, pricing: Optional[PricingConfig] = None) -> Decimal:
    """Sack-equivalent quantity: tons × 1000 / sack weight."""
    pricing = pricing or _DEFAULT_PRICING
    tons = to_decimal(tons)
    if tons < 0:
        raise ValueError("weight cannot be negative")
    return tons * KG_PER_TON / pricing.sack_weight_kg


def total_for(tons: Number, unit_price: Number) -> Decimal:
    """Total freight value: tons × price per ton."""
    tons = to_decimal(tons)
    unit_price = to_decimal(unit_price)
    if tons < 0 or unit_price < 0:
        raise ValueError("weight and unit price cannot be negative")
    return round_money(tons * unit_price)


def split_payment(total: Number, pricing: Optional[PricingConfig] = None) -> tuple[Decimal, Decimal]:
    """
    Split a total into advance and balance.

    The advance is rounded and the balance takes the remainder, so the two
    always add back to the rounded total.

    Returns:
        (advance, balance)
    """
    pricing = pricing or _DEFAULT_PRICING
    total = round_money(to_decimal(total))
    advance = round_money(total * pricing.advance_ratio)
    return advance, total - advance


def commission_for(tons: Number, pricing: Optional[PricingConfig] = None) -> Decimal:
    """Operator commission for a load: tons × commission per ton."""
    pricing = pricing or _DEFAULT_PRICING
    return round_money(to_decimal(tons) * pricing.commission_per_ton)


class FreightCalculation(BaseModel):
    """Values shown live on the freight form as weight/price change."""

    weight_loaded: Decimal
    unit_price: Decimal
    sacks_amount: Decimal
    total_value: Decimal
    advance_value: Decimal
    balance_value: Decimal

    @classmethod
    def compute(
        cls,
        weight_loaded: Number,
        unit_price: Number,
        pricing: Optional[PricingConfig] = None,
    ) -> "FreightCalculation":
        """Recompute every derived value from weight and price."""
        total = total_for(weight_loaded, unit_price)
        advance, balance = split_payment(total, pricing)
        return cls(
            weight_loaded=to_decimal(weight_loaded),
            unit_price=to_decimal(unit_price),
            sacks_amount=sacks_for(weight_loaded, pricing),
            total_value=total,
            advance_value=advance,
            balance_value=balance,
        )
