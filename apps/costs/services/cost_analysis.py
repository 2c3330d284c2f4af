"""
Cost analysis report.

Totals for a date range with a comparison against the previous calendar
month, a per-category breakdown and a six-month evolution series.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db.models import Q, Sum

from apps.accounts.models import User
from apps.costs.models import CostType

from .exceptions import InvalidPeriodError
from .ledger import get_cost_definitions, get_monthly_cost_total
from .periods import month_bounds, previous_months


EVOLUTION_MONTHS = 6


def get_cost_analysis(
    *,
    owner: User,
    start_date: date,
    end_date: date,
    search: str = ''
) -> dict:
    """
    Build the cost analysis for a date range.

    The search term filters the period figures and the category breakdown
    (case-insensitive match on description or category). The previous-month
    comparison and the evolution series always use every cost.

    Args:
        owner: Tenant whose costs are analysed
        start_date: First day of the range (inclusive)
        end_date: Last day of the range (inclusive)
        search: Optional text filter

    Returns:
        Dict with total, fixed_total, variable_total, count,
        previous_month_total, percent_change, categories and evolution

    Raises:
        InvalidPeriodError: If end_date is before start_date
    """
    if end_date < start_date:
        raise InvalidPeriodError("End date must not be before start date")

    costs = get_cost_definitions(owner=owner, start_date=start_date, end_date=end_date)
    if search:
        costs = costs.filter(Q(description__icontains=search) | Q(category__icontains=search))

    totals = defaultdict(Decimal)
    by_category = defaultdict(Decimal)
    default_category = settings.PRECIFIX['DEFAULT_COST_CATEGORY']

    for row in costs.order_by().values('type', 'category').annotate(total=Sum('value')):
        totals[row['type']] += row['total']
        by_category[row['category'] or default_category] += row['total']

    count = costs.count()
    total = sum(totals.values(), Decimal('0'))

    previous = start_date.replace(day=1) - relativedelta(months=1)
    previous_total, _ = get_monthly_cost_total(
        owner=owner, month=previous.month, year=previous.year
    )

    if previous_total > 0:
        percent_change = ((total - previous_total) / previous_total * 100).quantize(
            Decimal('0.1'), rounding=ROUND_HALF_UP
        )
    else:
        percent_change = Decimal('0')

    categories = sorted(
        ({'category': name, 'total': value} for name, value in by_category.items()),
        key=lambda item: item['total'],
        reverse=True,
    )

    evolution = []
    for month, year in previous_months(start_date, EVOLUTION_MONTHS):
        month_total, _ = get_monthly_cost_total(owner=owner, month=month, year=year)
        first_day, _last_day = month_bounds(month, year)
        evolution.append({
            'month': month,
            'year': year,
            'label': first_day.strftime('%Y-%m'),
            'total': month_total,
        })

    return {
        'start_date': start_date,
        'end_date': end_date,
        'total': total,
        'fixed_total': totals[CostType.FIXED.value],
        'variable_total': totals[CostType.VARIABLE.value],
        'count': count,
        'previous_month_total': previous_total,
        'percent_change': percent_change,
        'categories': categories,
        'evolution': evolution,
    }
