"""Brazilian number formatting for terminal and CSV output."""

from decimal import Decimal
from typing import Union

Number = Union[Decimal, int, float]


def format_number(value: Number, places: int = 2) -> str:
    """1234.5 -> '1.234,50'."""
    text = f"{Decimal(str(value)):,.{places}f}"
    return text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_brl(value: Number) -> str:
    """1234.5 -> 'R$ 1.234,50'."""
    sign = "-" if value < 0 else ""
    return f"{sign}R$ {format_number(abs(value))}"


def format_tons(value: Number) -> str:
    """Weights print with up to three decimals, trailing zeros dropped."""
    text = format_number(value, 3).rstrip("0").rstrip(",")
    return f"{text} t"
