"""
Date and time-of-day helpers shared by the cost and payables services.
"""

import calendar
import re
from datetime import date
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from .exceptions import InvalidPeriodError


HHMM_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})$')

FREQUENCY_STEPS = {
    'daily': relativedelta(days=1),
    'weekly': relativedelta(weeks=1),
    'monthly': relativedelta(months=1),
    'yearly': relativedelta(years=1),
}


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """
    Return the first and last calendar day of a month.

    Raises:
        InvalidPeriodError: If month is not within 1-12 or year is not positive
    """
    if not 1 <= month <= 12:
        raise InvalidPeriodError(f"Month must be between 1 and 12, got {month}")
    if year < 1:
        raise InvalidPeriodError(f"Year must be positive, got {year}")

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def is_in_month(value: Optional[date], month: int, year: int) -> bool:
    if value is None:
        return False
    return value.month == month and value.year == year


def parse_hhmm(text: Optional[str]) -> Optional[int]:
    """
    Convert an ``HH:MM`` string to minutes after midnight.

    Returns None for blank or malformed input, or when hours/minutes are
    out of range.
    """
    if not text:
        return None

    match = HHMM_PATTERN.match(text.strip())
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None

    return hours * 60 + minutes


def format_minutes(total: int) -> str:
    """Render a minute count as ``HH:MM`` (hours may exceed 24)."""
    if total < 0:
        return '00:00'
    hours, minutes = divmod(int(total), 60)
    return f'{hours:02d}:{minutes:02d}'


def add_occurrence(start: date, frequency: str, index: int) -> date:
    """
    Date of the ``index``-th occurrence of a series beginning at ``start``.

    Each occurrence is offset from the series start rather than from the
    previous occurrence, so a series starting on the 31st lands on the last
    day of short months and returns to the 31st afterwards.

    Raises:
        ValueError: If frequency is not daily, weekly, monthly or yearly
    """
    try:
        step = FREQUENCY_STEPS[frequency]
    except KeyError:
        raise ValueError(f"Unknown recurrence frequency: {frequency}")

    return start + step * index


def previous_months(reference: date, count: int) -> List[Tuple[int, int]]:
    """
    Return ``count`` (month, year) pairs ending at the month of ``reference``,
    oldest first.
    """
    first = reference.replace(day=1)
    return [
        ((first - relativedelta(months=offset)).month,
         (first - relativedelta(months=offset)).year)
        for offset in range(count - 1, -1, -1)
    ]
