"""
Accounts-payable reconciliation.

Merges a tenant's cost definitions with the payments registered in a month
into one list of payable items. Every obligation appears exactly once:

    - a cost definition dated in the month with no payment referencing it
      becomes a virtual item ("open", or "overdue" once its due date has
      passed)
    - every payment due in the month becomes a real item with its stored
      status, except that "pending" reads as "overdue" after the due date

Real items come first, then virtual ones, and the list is sorted by due date
with ties kept in that order. "Today" is always passed in explicitly.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable, List, Optional
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.costs.services.ledger import get_cost_definitions
from apps.costs.services.periods import is_in_month, month_bounds
from apps.payables.models import PaymentStatus

from .exceptions import InvalidStatusFilterError
from .ledger import get_payments_for_month


VIRTUAL_PREFIX = 'virtual-'

OPEN = 'open'

STATUS_BUCKETS = {
    'all': None,
    'paid': {PaymentStatus.PAID.value},
    'partially_paid': {PaymentStatus.PARTIALLY_PAID.value},
    'pending': {PaymentStatus.PENDING.value, OPEN},
    'overdue': {PaymentStatus.OVERDUE.value},
    'cancelled': {PaymentStatus.CANCELLED.value},
}

SETTLED_STATUSES = {PaymentStatus.PAID.value, PaymentStatus.CANCELLED.value}


@dataclass(frozen=True)
class PayableItem:
    """One obligation in the payables list."""
    id: str
    is_virtual: bool
    cost_definition_id: Optional[UUID]
    description: str
    due_date: date
    amount_original: Decimal
    amount_paid: Optional[Decimal]
    status: str
    category: str = ''
    payment_date: Any = None
    fine_amount: Optional[Decimal] = None
    interest_amount: Optional[Decimal] = None
    source: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class DueAlert:
    kind: str
    item: PayableItem


def derive_payment_status(*, stored_status: str, due_date: date, today: date) -> str:
    """
    Status shown for a stored payment.

    Only ``pending`` changes: it reads as ``overdue`` once the due date is
    before today. Every other stored status is returned as is.
    """
    if stored_status == PaymentStatus.PENDING and due_date < today:
        return PaymentStatus.OVERDUE.value
    return str(stored_status)


def _item_from_payment(payment, today):
    definition = payment.cost_definition
    return PayableItem(
        id=str(payment.id),
        is_virtual=False,
        cost_definition_id=payment.cost_definition_id,
        description=payment.description,
        due_date=payment.due_date,
        amount_original=payment.amount_original,
        amount_paid=payment.amount_paid,
        status=derive_payment_status(
            stored_status=payment.status,
            due_date=payment.due_date,
            today=today,
        ),
        category=definition.effective_category if definition is not None else '',
        payment_date=payment.payment_date,
        fine_amount=payment.fine_amount,
        interest_amount=payment.interest_amount,
        source=payment,
    )


def _item_from_definition(definition, today):
    due_date = definition.expense_date
    return PayableItem(
        id=f'{VIRTUAL_PREFIX}{definition.id}',
        is_virtual=True,
        cost_definition_id=definition.id,
        description=definition.description,
        due_date=due_date,
        amount_original=definition.value,
        amount_paid=None,
        status=PaymentStatus.OVERDUE.value if due_date < today else OPEN,
        category=definition.effective_category,
        source=definition,
    )


def build_payable_items(
    *,
    cost_definitions: Iterable,
    payments: Iterable,
    month: int,
    year: int,
    today: date
) -> List[PayableItem]:
    """
    Merge cost definitions and payments into the month's payable items.

    Args:
        cost_definitions: All of the tenant's definitions; the month filter
            is applied here on each definition's expense date (undated
            definitions never fall in a month)
        payments: The tenant's payments already limited to the month
        month: 1-12
        year: Calendar year
        today: Reference date for overdue checks

    Returns:
        PayableItems sorted by due date; reading has no side effects, so the
        same inputs always give the same list

    Raises:
        InvalidPeriodError: If month is out of range
    """
    month_bounds(month, year)  # raises on a bad month

    payments = list(payments)
    paid_definition_ids = {
        payment.cost_definition_id
        for payment in payments
        if payment.cost_definition_id is not None
    }

    real_items = [_item_from_payment(payment, today) for payment in payments]
    virtual_items = [
        _item_from_definition(definition, today)
        for definition in cost_definitions
        if is_in_month(definition.expense_date, month, year)
        and definition.id not in paid_definition_ids
    ]

    return sorted(real_items + virtual_items, key=lambda item: item.due_date)


def filter_payable_items(
    items: Iterable[PayableItem],
    *,
    search: str = '',
    status: str = 'all'
) -> List[PayableItem]:
    """
    Filter items by description text and status bucket.

    The ``pending`` bucket also holds virtual ``open`` items.

    Raises:
        InvalidStatusFilterError: If the bucket is unknown
    """
    if status not in STATUS_BUCKETS:
        raise InvalidStatusFilterError(
            f"Unknown status filter '{status}'. Choose from: {', '.join(STATUS_BUCKETS)}"
        )

    statuses = STATUS_BUCKETS[status]
    needle = search.strip().casefold()

    return [
        item for item in items
        if (statuses is None or item.status in statuses)
        and (not needle or needle in item.description.casefold())
    ]


def summarize_payable_items(items: Iterable[PayableItem]) -> dict:
    """
    Totals for a list of payable items.

    ``outstanding`` is what is still owed on items that are neither paid nor
    cancelled; overpayments never make it negative.
    """
    items = list(items)
    zero = Decimal('0.00')

    total_amount = sum((item.amount_original for item in items), zero)
    total_paid = sum((item.amount_paid or zero for item in items), zero)
    outstanding = sum(
        (
            max(item.amount_original - (item.amount_paid or zero), zero)
            for item in items
            if item.status not in SETTLED_STATUSES
        ),
        zero,
    )

    return {
        'count': len(items),
        'total_amount': total_amount,
        'total_paid': total_paid,
        'outstanding': outstanding,
        'by_status': dict(Counter(item.status for item in items)),
    }


def get_payables_for_month(
    *,
    owner: User,
    month: int,
    year: int,
    today: Optional[date] = None,
    search: str = '',
    status: str = 'all'
) -> List[PayableItem]:
    """
    Reconciled, filtered payables of a tenant for one month.

    Args:
        owner: Tenant whose obligations are listed
        month: 1-12
        year: Calendar year
        today: Reference date for overdue checks (default: local date)
        search: Case-insensitive description filter
        status: Status bucket (all, paid, partially_paid, pending, overdue,
            cancelled)

    Returns:
        List of PayableItem sorted by due date

    Raises:
        InvalidPeriodError: If month is out of range
        InvalidStatusFilterError: If the status bucket is unknown
    """
    today = today or timezone.localdate()
    first_day, last_day = month_bounds(month, year)

    items = build_payable_items(
        cost_definitions=get_cost_definitions(
            owner=owner,
            start_date=first_day,
            end_date=last_day,
        ),
        payments=get_payments_for_month(owner=owner, month=month, year=year),
        month=month,
        year=year,
        today=today,
    )

    return filter_payable_items(items, search=search, status=status)


def get_due_alerts(*, owner: User, today: Optional[date] = None) -> List[DueAlert]:
    """
    Unpaid obligations of the current month that need attention.

    Returns:
        ``due_today`` alerts for open or pending items due today and
        ``overdue`` alerts for overdue items, in due-date order
    """
    today = today or timezone.localdate()
    alerts = []

    for item in get_payables_for_month(owner=owner, month=today.month, year=today.year, today=today):
        if item.status == PaymentStatus.OVERDUE:
            alerts.append(DueAlert(kind='overdue', item=item))
        elif item.status in (OPEN, PaymentStatus.PENDING) and item.due_date == today:
            alerts.append(DueAlert(kind='due_today', item=item))

    return alerts
