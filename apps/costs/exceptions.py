"""
HTTP exceptions for costs app.

Views translate the domain exceptions in ``services.exceptions`` into these.
"""
from rest_framework.exceptions import APIException


class CostNotFound(APIException):
    """Cost definition not found (or owned by someone else)."""
    status_code = 404
    default_detail = 'Cost not found.'
    default_code = 'cost_not_found'


class InvalidCost(APIException):
    """Cost data breaks the value or recurrence rules."""
    status_code = 400
    default_detail = 'Invalid cost data.'
    default_code = 'invalid_cost'


class InvalidSchedule(APIException):
    """Operating-hours time is malformed."""
    status_code = 400
    default_detail = 'Invalid operating hours.'
    default_code = 'invalid_schedule'


class InvalidStrategy(APIException):
    """Unknown hourly-cost strategy requested."""
    status_code = 400
    default_detail = 'Unknown hourly cost strategy.'
    default_code = 'invalid_strategy'


class InvalidPeriod(APIException):
    """Month/year or date range is out of range."""
    status_code = 400
    default_detail = 'Invalid period.'
    default_code = 'invalid_period'
