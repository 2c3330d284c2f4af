"""
Hourly-cost calculator.

Derives the minimum rate per productive hour a shop must charge to cover its
monthly costs. Two strategies are available:

    weekly_average  Net weekly hours times an average weeks-per-month
                    (4.345 by default). This is the default strategy.
    daily_average   Monthly cost spread over working days (days with any
                    time set, times a flat 4 weeks), then over the average
                    productive day length.

Both strategies read the weeks-per-month constant from ``settings.PRECIFIX``
and can be given another one explicitly. Every division by zero yields zero.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union

from django.conf import settings
from django.utils import timezone

from apps.accounts.models import User
from apps.costs.models import OperatingHoursSchedule, PricingProfile

from .exceptions import InvalidStrategyError
from .ledger import get_monthly_cost_total, get_operating_hours
from .operating_hours import DayHours, compute_day_breakdown


CENT = Decimal('0.01')
ZERO = Decimal('0')
MINUTES_PER_HOUR = Decimal('60')


def _round(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    if not denominator:
        return ZERO
    return numerator / denominator


@dataclass(frozen=True)
class HourlyCostResult:
    """Breakdown of an hourly-cost calculation."""
    strategy: str
    active_days: int
    total_weekly_minutes: int
    total_weekly_hours: Decimal
    average_daily_hours: Decimal
    monthly_hours: Decimal
    working_days_per_month: Decimal
    daily_cost: Decimal
    total_costs: Decimal
    hourly_rate: Decimal
    breakdown: List[DayHours] = field(default_factory=list)


@dataclass(frozen=True)
class PricingAddons:
    investment_per_hour: Decimal
    working_capital_per_hour: Decimal
    suggested_minimum_rate: Decimal


class HourlyCostStrategy:
    """Base class for hourly-cost strategies."""

    name = None
    weeks_setting = None

    def __init__(self, weeks_per_month=None):
        if weeks_per_month is None:
            weeks_per_month = settings.PRECIFIX[self.weeks_setting]
        self.weeks_per_month = Decimal(str(weeks_per_month))

    def count_days(self, breakdown: List[DayHours]) -> int:
        raise NotImplementedError

    def calculate(self, total_costs: Decimal, breakdown: List[DayHours]) -> HourlyCostResult:
        raise NotImplementedError

    def _result(self, *, total_costs, breakdown, days, hourly_rate, daily_cost,
                average_daily_hours=None):
        weekly_minutes = sum(day.net_minutes for day in breakdown)
        weekly_hours = Decimal(weekly_minutes) / MINUTES_PER_HOUR
        if average_daily_hours is None:
            average_daily_hours = _safe_divide(weekly_hours, Decimal(days))

        return HourlyCostResult(
            strategy=self.name,
            active_days=days,
            total_weekly_minutes=weekly_minutes,
            total_weekly_hours=_round(weekly_hours),
            average_daily_hours=_round(average_daily_hours),
            monthly_hours=_round(weekly_hours * self.weeks_per_month),
            working_days_per_month=_round(days * self.weeks_per_month),
            daily_cost=_round(daily_cost),
            total_costs=total_costs,
            hourly_rate=_round(hourly_rate),
            breakdown=breakdown,
        )


class WeeklyAverageStrategy(HourlyCostStrategy):
    """
    Total cost divided by monthly hours.

    Only days with productive time left after lunch count as active.
    """

    name = 'weekly_average'
    weeks_setting = 'WEEKLY_AVERAGE_WEEKS_PER_MONTH'

    def count_days(self, breakdown):
        return sum(1 for day in breakdown if day.net_minutes > 0)

    def calculate(self, total_costs, breakdown):
        days = self.count_days(breakdown)
        weekly_hours = Decimal(sum(day.net_minutes for day in breakdown)) / MINUTES_PER_HOUR
        monthly_hours = weekly_hours * self.weeks_per_month

        return self._result(
            total_costs=total_costs,
            breakdown=breakdown,
            days=days,
            hourly_rate=_safe_divide(total_costs, monthly_hours),
            daily_cost=_safe_divide(total_costs, days * self.weeks_per_month),
        )


class DailyAverageStrategy(HourlyCostStrategy):
    """
    Daily cost divided by the average working-day length.

    Every day with a start or an end time is a working day, even one whose
    span is eaten by lunch. The average day length only covers days that
    have productive time.
    """

    name = 'daily_average'
    weeks_setting = 'DAILY_AVERAGE_WEEKS_PER_MONTH'

    def count_days(self, breakdown):
        return sum(1 for day in breakdown if day.is_active)

    def calculate(self, total_costs, breakdown):
        days = self.count_days(breakdown)
        productive_days = sum(1 for day in breakdown if day.net_minutes > 0)
        weekly_hours = Decimal(sum(day.net_minutes for day in breakdown)) / MINUTES_PER_HOUR

        average_daily_hours = _safe_divide(weekly_hours, Decimal(productive_days))
        daily_cost = _safe_divide(total_costs, days * self.weeks_per_month)

        return self._result(
            total_costs=total_costs,
            breakdown=breakdown,
            days=days,
            hourly_rate=_safe_divide(daily_cost, average_daily_hours),
            daily_cost=daily_cost,
            average_daily_hours=average_daily_hours,
        )


STRATEGIES = {
    WeeklyAverageStrategy.name: WeeklyAverageStrategy,
    DailyAverageStrategy.name: DailyAverageStrategy,
}


def get_strategy(name: Optional[str] = None) -> HourlyCostStrategy:
    """
    Instantiate a strategy by name (default from settings).

    Raises:
        InvalidStrategyError: If the name is unknown
    """
    name = name or settings.PRECIFIX['HOURLY_COST_STRATEGY']
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise InvalidStrategyError(
            f"Unknown strategy '{name}'. Choose from: {', '.join(sorted(STRATEGIES))}"
        )


def calculate_hourly_cost(
    *,
    total_costs: Decimal,
    schedule: Optional[OperatingHoursSchedule],
    strategy: Union[str, HourlyCostStrategy, None] = None
) -> HourlyCostResult:
    """
    Compute the cost per productive hour.

    Args:
        total_costs: Costs to cover in the month
        schedule: Weekly schedule; None counts as no working days
        strategy: Strategy instance or name (default from settings)

    Returns:
        HourlyCostResult; hourly_rate is 0 when there are no productive hours

    Raises:
        InvalidStrategyError: If a strategy name is unknown
    """
    if not isinstance(strategy, HourlyCostStrategy):
        strategy = get_strategy(strategy)

    breakdown = compute_day_breakdown(
        schedule,
        lunch_minutes=settings.PRECIFIX['LUNCH_BREAK_MINUTES']
    )
    return strategy.calculate(Decimal(total_costs), breakdown)


def get_hourly_cost_for_owner(
    *,
    owner: User,
    month: Optional[int] = None,
    year: Optional[int] = None,
    strategy: Optional[str] = None,
    today: Optional[date] = None
) -> HourlyCostResult:
    """
    Hourly cost for a tenant, using the costs dated in a month.

    Month and year default to the current ones.
    """
    today = today or timezone.localdate()
    month = month or today.month
    year = year or today.year

    total, _count = get_monthly_cost_total(owner=owner, month=month, year=year)
    schedule = get_operating_hours(owner=owner)

    return calculate_hourly_cost(total_costs=total, schedule=schedule, strategy=strategy)


def calculate_pricing_addons(
    *,
    monthly_hours: Decimal,
    profile: Optional[PricingProfile],
    hourly_rate: Decimal = ZERO
) -> PricingAddons:
    """
    Per-hour amounts that pay back the initial investment and build working
    capital, and the minimum rate including the enabled ones.

    Args:
        monthly_hours: Productive hours per month
        profile: Owner's pricing profile; None disables both add-ons
        hourly_rate: Cost-only hourly rate the add-ons are stacked on

    Returns:
        PricingAddons with every amount rounded to cents
    """
    investment = ZERO
    working_capital = ZERO

    if profile is not None:
        if profile.include_investment:
            investment = _safe_divide(
                profile.initial_investment,
                monthly_hours * profile.investment_return_months
            )
        if profile.include_working_capital:
            working_capital = _safe_divide(
                profile.working_capital_goal,
                monthly_hours * profile.working_capital_months
            )

    return PricingAddons(
        investment_per_hour=_round(investment),
        working_capital_per_hour=_round(working_capital),
        suggested_minimum_rate=_round(hourly_rate + investment + working_capital),
    )
