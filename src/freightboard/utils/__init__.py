"""Shared helpers."""

from .date_picker import DateRange, MonthView, format_long_date, format_short_date, parse_local_date

__all__ = ["DateRange", "MonthView", "format_long_date", "format_short_date", "parse_local_date"]
