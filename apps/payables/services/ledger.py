"""
Payment ledger reader.
"""

from django.db.models import QuerySet

from apps.accounts.models import User
from apps.costs.services.periods import month_bounds
from apps.payables.models import PaymentRecord


def get_payments_for_month(*, owner: User, month: int, year: int) -> QuerySet:
    """
    Get the owner's payments due within a calendar month.

    Args:
        owner: Tenant whose payments are read
        month: 1-12
        year: Calendar year

    Returns:
        QuerySet of PaymentRecord ordered by due date, with the cost
        definition joined

    Raises:
        InvalidPeriodError: If month is out of range
    """
    first_day, last_day = month_bounds(month, year)

    return (
        PaymentRecord.objects
        .filter(owner=owner, due_date__gte=first_day, due_date__lte=last_day)
        .select_related('cost_definition')
        .order_by('due_date', 'created_at')
    )
