"""
Operating hours service.

Stores the tenant's weekly schedule and turns it into per-day productive
minutes for the hourly-cost calculator.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from django.db import transaction

from apps.accounts.models import User
from apps.costs.models import OperatingHoursSchedule, WEEKDAYS

from .exceptions import InvalidScheduleError
from .periods import parse_hhmm


logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
UNSET_TIME = '00:00'

SCHEDULE_FIELDS = [
    f'{day}_{edge}'
    for day, _label in WEEKDAYS
    for edge in ('start', 'end')
]


@dataclass(frozen=True)
class DayHours:
    """Productive time of one weekday."""
    day: str
    label: str
    start: str
    end: str
    is_active: bool
    is_configured: bool
    raw_minutes: int
    net_minutes: int


@transaction.atomic
def save_operating_hours(
    *,
    owner: User,
    hours: Dict[str, str],
    allows_overnight: Optional[bool] = None
) -> OperatingHoursSchedule:
    """
    Create or update the owner's single schedule row.

    Args:
        owner: Tenant owning the schedule
        hours: Mapping of ``<weekday>_start`` / ``<weekday>_end`` to ``HH:MM``
            strings; blank clears the time. Days not mentioned are kept.
        allows_overnight: New cross-midnight setting (optional)

    Returns:
        Saved OperatingHoursSchedule

    Raises:
        InvalidScheduleError: If a key is unknown or a time is not valid HH:MM
    """
    for field, text in hours.items():
        if field not in SCHEDULE_FIELDS:
            raise InvalidScheduleError(f"Unknown schedule field: {field}")
        if text and parse_hhmm(text) is None:
            logger.warning("Rejected schedule time %r for %s (owner %s)", text, field, owner.id)
            raise InvalidScheduleError(f"Invalid time for {field}: {text!r} (expected HH:MM)")

    schedule, created = (
        OperatingHoursSchedule.objects
        .select_for_update()
        .get_or_create(owner=owner)
    )

    for field, text in hours.items():
        setattr(schedule, field, (text or '').strip())

    if allows_overnight is not None:
        schedule.allows_overnight = allows_overnight

    schedule.save()
    logger.info(
        "%s operating hours for owner %s",
        'Created' if created else 'Updated', owner.id
    )

    return schedule


def _day_span_minutes(start: str, end: str, allows_overnight: bool) -> int:
    start_minutes = parse_hhmm(start)
    end_minutes = parse_hhmm(end)
    if start_minutes is None or end_minutes is None:
        return 0

    if end_minutes > start_minutes:
        return end_minutes - start_minutes
    if end_minutes < start_minutes and allows_overnight:
        return end_minutes + MINUTES_PER_DAY - start_minutes
    return 0


def compute_day_breakdown(
    schedule: Optional[OperatingHoursSchedule],
    *,
    lunch_minutes: int = 60
) -> List[DayHours]:
    """
    Net productive minutes for every weekday, Monday first.

    A day is active when either of its times is filled in. It is configured
    (and so counted) only when both are filled in and they are not both
    ``00:00``. Each configured day loses ``lunch_minutes``, never going below
    zero. An end time before the start only wraps past midnight when the
    schedule allows overnight shifts; otherwise the day contributes nothing.

    A missing schedule yields seven empty days.
    """
    allows_overnight = bool(schedule and schedule.allows_overnight)
    breakdown = []

    for day, label in WEEKDAYS:
        if schedule is None:
            start, end = '', ''
        else:
            start, end = schedule.get_day_times(day)
        start, end = start.strip(), end.strip()

        is_active = bool(start or end)
        is_configured = bool(start and end) and not (start == UNSET_TIME and end == UNSET_TIME)

        raw = _day_span_minutes(start, end, allows_overnight) if is_configured else 0
        net = max(raw - lunch_minutes, 0)

        breakdown.append(DayHours(
            day=day,
            label=label,
            start=start,
            end=end,
            is_active=is_active,
            is_configured=is_configured,
            raw_minutes=raw,
            net_minutes=net,
        ))

    return breakdown
