# src/btc_dca/schedule/schedule_generator.py
"""
Schedule Generator

Turns a date range and a purchase cadence into the ordered list of
calendar dates on which a recurring purchase happens.

Rules:
    - The first entry is always the start date.
    - Entries are strictly increasing and never exceed the end date
      (the end date itself is included when it falls on a step).
    - start > end yields an empty schedule.
    - Monthly steps are calendar months anchored on the start date, so a
      day-of-month that does not exist in a shorter month is clamped to that
      month's last day and restored in longer months
      (2024-01-31 -> 2024-02-29 -> 2024-03-31).
"""

import calendar
import re
from datetime import date, datetime, timedelta
from enum import Enum
from typing import List, Optional, Union

import pandas as pd

from btc_dca.exceptions import InvalidInputError
from btc_dca.utils.logger import get_logger

logger = get_logger("schedule_generator")

DateLike = Union[date, datetime, pd.Timestamp, str]


class Cadence(str, Enum):
    """Interval between successive scheduled purchases."""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: Union["Cadence", str]) -> "Cadence":
        """
        Resolve a cadence from an enum member or a case-insensitive name.

        Raises:
            InvalidInputError: If the value names no known cadence.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidInputError(
            f"Unknown cadence: {value!r}. Valid: {[c.value for c in cls]}"
        )


_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")

_FIXED_STEPS = {
    Cadence.WEEKLY: timedelta(days=7),
    Cadence.BIWEEKLY: timedelta(days=14),
}


def to_date(value: DateLike) -> date:
    """
    Coerce a date-like value to a calendar date (day granularity).

    Accepts date, datetime / pandas.Timestamp (time part dropped) and ISO
    strings ("2024-01-31" or "2024-01-31T12:00:00").

    Raises:
        InvalidInputError: If the value is not a date.
    """
    if value is pd.NaT:
        raise InvalidInputError("Date is NaT")
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if not _ISO_DATE.match(text):
                raise ValueError(text)
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text).date()
        except ValueError:
            raise InvalidInputError(f"Invalid date: {value!r}. Use YYYY-MM-DD") from None
    raise InvalidInputError(f"Expected a date, got {type(value).__name__}")


def _add_months(anchor: date, months: int) -> Optional[date]:
    """anchor + months calendar months, day clamped to month end; None past year 9999."""
    month_index = anchor.month - 1 + months
    year = anchor.year + month_index // 12
    if year > date.max.year:
        return None
    month = month_index % 12 + 1
    day = min(anchor.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def generate_schedule(start: DateLike, end: DateLike, cadence: Union[Cadence, str]) -> List[str]:
    """
    Build the purchase schedule for a date range.

    Args:
        start: First purchase date.
        end: Last date a purchase may fall on (inclusive).
        cadence: weekly, biweekly or monthly.

    Returns:
        List[str]: ISO-8601 dates, strictly increasing, starting at start.
    """
    start_day = to_date(start)
    end_day = to_date(end)
    step = Cadence.parse(cadence)

    if start_day > end_day:
        logger.debug(f"Empty schedule: start {start_day} is after end {end_day}")
        return []

    dates: List[date] = []
    if step in _FIXED_STEPS:
        delta = _FIXED_STEPS[step]
        current = start_day
        while True:
            dates.append(current)
            # stop before stepping past end_day (or past date.max)
            if end_day - current < delta:
                break
            current += delta
    else:
        months = 0
        current = start_day
        while current <= end_day:
            dates.append(current)
            months += 1
            current = _add_months(start_day, months)
            if current is None:
                break

    logger.debug(f"Generated {len(dates)} {step.value} dates from {start_day} to {end_day}")
    return [d.isoformat() for d in dates]
