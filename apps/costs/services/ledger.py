"""
Cost ledger reader.

Read-only queries over a tenant's cost definitions and schedule. Every query
is scoped by owner; database errors propagate to the caller.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from django.db.models import Count, QuerySet, Sum

from apps.accounts.models import User
from apps.costs.models import CostDefinition, OperatingHoursSchedule

from .periods import month_bounds


def get_cost_definitions(
    *,
    owner: User,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> QuerySet:
    """
    Get the owner's cost definitions, optionally bounded by expense date.

    Both bounds are inclusive. When a bound is given, definitions without an
    expense date are excluded.

    Args:
        owner: Tenant whose rows are read
        start_date: Earliest expense date (optional)
        end_date: Latest expense date (optional)

    Returns:
        QuerySet of CostDefinition ordered by expense date
    """
    queryset = CostDefinition.objects.filter(owner=owner)

    if start_date is not None:
        queryset = queryset.filter(expense_date__gte=start_date)
    if end_date is not None:
        queryset = queryset.filter(expense_date__lte=end_date)

    return queryset.order_by('expense_date', 'created_at')


def get_monthly_cost_total(*, owner: User, month: int, year: int) -> Tuple[Decimal, int]:
    """
    Sum the values of definitions whose expense date falls in a month.

    Returns:
        Tuple of (total, number of definitions); total is Decimal('0') when
        nothing matches
    """
    first_day, last_day = month_bounds(month, year)

    aggregates = get_cost_definitions(
        owner=owner,
        start_date=first_day,
        end_date=last_day,
    ).aggregate(total=Sum('value'), count=Count('id'))

    return aggregates['total'] or Decimal('0'), aggregates['count']


def get_operating_hours(*, owner: User) -> Optional[OperatingHoursSchedule]:
    """Get the owner's schedule, or None when none was saved yet."""
    return OperatingHoursSchedule.objects.filter(owner=owner).first()
