"""
Costs app services layer.

Services contain business logic and orchestrate operations across models.
All state-changing operations use transactions.
"""

from .exceptions import (
    CostsServiceError,
    CostNotFoundError,
    InvalidCostError,
    InvalidScheduleError,
    InvalidStrategyError,
    InvalidPeriodError,
)

from .ledger import (
    get_cost_definitions,
    get_monthly_cost_total,
    get_operating_hours,
)

from .cost_management import (
    create_cost,
    update_cost,
    delete_cost,
    get_cost_by_id,
)

from .operating_hours import (
    save_operating_hours,
    compute_day_breakdown,
)

from .hourly_cost import (
    HourlyCostResult,
    WeeklyAverageStrategy,
    DailyAverageStrategy,
    calculate_hourly_cost,
    calculate_pricing_addons,
    get_hourly_cost_for_owner,
    get_strategy,
)

from .cost_analysis import (
    get_cost_analysis,
)


__all__ = [
    # Exceptions
    'CostsServiceError',
    'CostNotFoundError',
    'InvalidCostError',
    'InvalidScheduleError',
    'InvalidStrategyError',
    'InvalidPeriodError',

    # Ledger
    'get_cost_definitions',
    'get_monthly_cost_total',
    'get_operating_hours',

    # Cost Management
    'create_cost',
    'update_cost',
    'delete_cost',
    'get_cost_by_id',

    # Operating Hours
    'save_operating_hours',
    'compute_day_breakdown',

    # Hourly Cost
    'HourlyCostResult',
    'WeeklyAverageStrategy',
    'DailyAverageStrategy',
    'calculate_hourly_cost',
    'calculate_pricing_addons',
    'get_hourly_cost_for_owner',
    'get_strategy',

    # Analysis
    'get_cost_analysis',
]
