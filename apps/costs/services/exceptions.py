"""
Domain-specific exceptions for costs app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class CostsServiceError(Exception):
    """Base exception for all costs service errors."""
    pass


class CostNotFoundError(CostsServiceError):
    """Raised when a cost definition does not exist or belongs to another owner."""
    pass


class InvalidCostError(CostsServiceError):
    """Raised when cost data breaks the value or recurrence rules."""
    pass


class InvalidScheduleError(CostsServiceError):
    """Raised when an operating-hours time is not a valid HH:MM string."""
    pass


class InvalidStrategyError(CostsServiceError):
    """Raised when an unknown hourly-cost strategy is requested."""
    pass


class InvalidPeriodError(CostsServiceError):
    """Raised when a month/year period is out of range."""
    pass
