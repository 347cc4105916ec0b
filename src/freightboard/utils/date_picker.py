"""
Date picker and date-range helpers.

Dates are local calendar days: "2025-03-15" is the 15th regardless of
timezone. Weeks start on Sunday.
"""

import calendar
from datetime import date, datetime
from typing import Optional, Union

from pydantic import BaseModel, model_validator

MONTHS_PT = [
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
]
WEEKDAYS_PT = ["Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb"]

DateLike = Union[str, date, datetime, None]

_calendar = calendar.Calendar(firstweekday=calendar.SUNDAY)


def parse_local_date(value: DateLike, default: Optional[date] = None) -> Optional[date]:
    """
    Parse a form value into a calendar day.

    Args:
        value: "YYYY-MM-DD", an ISO datetime string, a date or a datetime
        default: Returned when value is empty

    Returns:
        The parsed date, or default for empty input

    Raises:
        ValueError: If the string is not a valid ISO date
    """
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    value = value.strip()
    if "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return date.fromisoformat(value)


def format_long_date(day: date) -> str:
    """'15 de março de 2025'."""
    return f"{day.day:02d} de {MONTHS_PT[day.month - 1]} de {day.year}"


def format_short_date(day: Optional[date]) -> str:
    """'15/03/2025', or '-' when missing."""
    if day is None:
        return "-"
    return day.strftime("%d/%m/%Y")


class CalendarDay(BaseModel):
    """One cell of the month grid."""

    day: date
    in_month: bool
    selected: bool
    today: bool


class MonthView(BaseModel):
    """The month currently shown by the picker."""

    year: int
    month: int
    selected: Optional[date] = None
    today: date

    @classmethod
    def for_value(cls, value: DateLike = None, today: Optional[date] = None) -> "MonthView":
        """Open the picker on the month of value (or today when empty)."""
        today = today or date.today()
        selected = parse_local_date(value)
        shown = selected or today
        return cls(year=shown.year, month=shown.month, selected=selected, today=today)

    @property
    def title(self) -> str:
        return f"{MONTHS_PT[self.month - 1]} {self.year}"

    def weeks(self) -> list[list[CalendarDay]]:
        """Whole weeks from the Sunday before the 1st to the Saturday after month end."""
        return [
            [
                CalendarDay(
                    day=d,
                    in_month=d.month == self.month,
                    selected=d == self.selected,
                    today=d == self.today,
                )
                for d in week
            ]
            for week in _calendar.monthdatescalendar(self.year, self.month)
        ]

    def next_month(self) -> "MonthView":
        year, month = (self.year + 1, 1) if self.month == 12 else (self.year, self.month + 1)
        return self.model_copy(update={"year": year, "month": month})

    def previous_month(self) -> "MonthView":
        year, month = (self.year - 1, 12) if self.month == 1 else (self.year, self.month - 1)
        return self.model_copy(update={"year": year, "month": month})

    def select(self, day: date) -> "MonthView":
        """Pick a day; the view jumps to its month."""
        return self.model_copy(update={"selected": day, "year": day.year, "month": day.month})

    def go_to_today(self) -> "MonthView":
        return self.select(self.today)


class DateRange(BaseModel):
    """Inclusive date range; either end may be open."""

    start: Optional[date] = None
    end: Optional[date] = None

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start and self.end and self.start > self.end:
            raise ValueError("start date must not be after end date")
        return self

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        if self.start and day < self.start:
            return False
        if self.end and day > self.end:
            return False
        return True
