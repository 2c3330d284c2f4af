"""
Cost definition management service.

Handles cost CRUD, including materialization of recurring series into one
row per occurrence.
"""

import logging
import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db import transaction

from apps.accounts.models import User
from apps.costs.models import CostDefinition, CostType, RecurrenceFrequency

from .exceptions import CostNotFoundError, InvalidCostError
from .periods import add_occurrence


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'description',
    'value',
    'type',
    'expense_date',
    'is_recurring',
    'recurrence_frequency',
    'recurrence_end_date',
    'category',
    'observation',
)


def _validate_cost_fields(
    *,
    value: Decimal,
    type: str,
    is_recurring: bool,
    recurrence_frequency: Optional[str]
) -> None:
    if value is None or value < 0:
        raise InvalidCostError("Cost value must be zero or greater")

    if type not in CostType.values:
        raise InvalidCostError(f"Unknown cost type: {type}")

    if is_recurring:
        if not recurrence_frequency:
            raise InvalidCostError("Recurring costs need a recurrence frequency")
        if recurrence_frequency not in RecurrenceFrequency.values:
            raise InvalidCostError(f"Unknown recurrence frequency: {recurrence_frequency}")
    elif recurrence_frequency:
        raise InvalidCostError("Only recurring costs can have a recurrence frequency")


def build_occurrence_dates(
    *,
    start: date,
    frequency: str,
    end: Optional[date] = None
) -> List[date]:
    """
    List the due dates of a recurring series.

    Dates run from ``start`` up to and including ``end``. Without an end the
    series covers ``RECURRENCE_DEFAULT_MONTHS`` months. The list never holds
    more than ``RECURRENCE_MAX_OCCURRENCES`` dates.

    Args:
        start: First due date
        frequency: daily, weekly, monthly or yearly
        end: Last allowed due date (optional)

    Returns:
        Ascending list of dates, always containing ``start``
    """
    options = settings.PRECIFIX
    if end is None:
        end = start + relativedelta(months=options['RECURRENCE_DEFAULT_MONTHS'])

    dates = []
    index = 0
    while index < options['RECURRENCE_MAX_OCCURRENCES']:
        occurrence = add_occurrence(start, frequency, index)
        if occurrence > end:
            break
        dates.append(occurrence)
        index += 1

    return dates


def create_cost(
    *,
    owner: User,
    description: str,
    value: Decimal,
    type: str,
    expense_date: Optional[date] = None,
    is_recurring: bool = False,
    recurrence_frequency: Optional[str] = None,
    recurrence_end_date: Optional[date] = None,
    category: str = '',
    observation: str = ''
) -> List[CostDefinition]:
    """
    Create a cost definition, or a whole recurring series of them.

    A recurring cost is written as one row per occurrence, every row sharing
    a fresh ``recurrence_group_id``. The series is written atomically.
    No payment rows are created here; a cost only becomes a payment when
    one is registered against it.

    Args:
        owner: Tenant creating the cost
        description: What the cost is
        value: Amount per occurrence (>= 0)
        type: 'fixed' or 'variable'
        expense_date: Due date of the first (or only) occurrence
        is_recurring: Whether to materialize a series
        recurrence_frequency: daily, weekly, monthly or yearly
        recurrence_end_date: Last allowed occurrence date (optional)
        category: Free-text category
        observation: Free-text notes

    Returns:
        Created CostDefinition rows in due-date order

    Raises:
        InvalidCostError: If the value is negative, the recurrence fields are
            inconsistent, or a recurring series has no start date or ends
            before it starts
    """
    _validate_cost_fields(
        value=value,
        type=type,
        is_recurring=is_recurring,
        recurrence_frequency=recurrence_frequency,
    )

    base_fields = {
        'owner': owner,
        'description': description,
        'value': value,
        'type': type,
        'is_recurring': is_recurring,
        'recurrence_frequency': recurrence_frequency if is_recurring else None,
        'recurrence_end_date': recurrence_end_date if is_recurring else None,
        'category': category,
        'observation': observation,
    }

    if not is_recurring:
        cost = CostDefinition.objects.create(expense_date=expense_date, **base_fields)
        logger.info("Created cost %s for owner %s", cost.id, owner.id)
        return [cost]

    if expense_date is None:
        raise InvalidCostError("Recurring costs need a start date")
    if recurrence_end_date is not None and recurrence_end_date < expense_date:
        raise InvalidCostError("Recurrence end date is before the start date")

    occurrence_dates = build_occurrence_dates(
        start=expense_date,
        frequency=recurrence_frequency,
        end=recurrence_end_date,
    )
    group_id = uuid.uuid4()

    with transaction.atomic():
        costs = CostDefinition.objects.bulk_create([
            CostDefinition(
                expense_date=occurrence,
                recurrence_group_id=group_id,
                **base_fields
            )
            for occurrence in occurrence_dates
        ])

    logger.info(
        "Created recurring series %s with %d occurrences for owner %s",
        group_id, len(costs), owner.id
    )
    return costs


def get_cost_by_id(*, cost_id: UUID, owner: User) -> CostDefinition:
    """
    Get one of the owner's cost definitions.

    Raises:
        CostNotFoundError: If the cost doesn't exist or belongs to someone else
    """
    try:
        return CostDefinition.objects.get(id=cost_id, owner=owner)
    except CostDefinition.DoesNotExist:
        raise CostNotFoundError(f"Cost with ID {cost_id} not found")


@transaction.atomic
def update_cost(*, cost_id: UUID, owner: User, **changes) -> CostDefinition:
    """
    Update a single cost definition.

    Payments already registered against the cost keep their own copy of the
    description and amount and are not modified.

    Args:
        cost_id: UUID of the cost
        owner: Tenant owning the cost
        **changes: Any of the fields in ``UPDATABLE_FIELDS``

    Returns:
        Updated CostDefinition

    Raises:
        CostNotFoundError: If the cost doesn't exist or belongs to someone else
        InvalidCostError: If the resulting row breaks the value or recurrence rules
    """
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidCostError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    try:
        cost = CostDefinition.objects.select_for_update().get(id=cost_id, owner=owner)
    except CostDefinition.DoesNotExist:
        raise CostNotFoundError(f"Cost with ID {cost_id} not found")

    for field, new_value in changes.items():
        setattr(cost, field, new_value)

    if not cost.is_recurring:
        cost.recurrence_frequency = None
        cost.recurrence_end_date = None

    _validate_cost_fields(
        value=cost.value,
        type=cost.type,
        is_recurring=cost.is_recurring,
        recurrence_frequency=cost.recurrence_frequency,
    )

    cost.save()
    logger.info("Updated cost %s for owner %s", cost.id, owner.id)

    return cost


@transaction.atomic
def delete_cost(*, cost_id: UUID, owner: User, delete_series: bool = False) -> int:
    """
    Delete a cost definition, or its whole recurring series.

    Registered payments survive with their cost reference cleared.

    Args:
        cost_id: UUID of the cost
        owner: Tenant owning the cost
        delete_series: Also delete every row sharing the recurrence group

    Returns:
        Number of cost definitions deleted

    Raises:
        CostNotFoundError: If the cost doesn't exist or belongs to someone else
    """
    cost = get_cost_by_id(cost_id=cost_id, owner=owner)

    if delete_series and cost.recurrence_group_id:
        queryset = CostDefinition.objects.filter(
            owner=owner,
            recurrence_group_id=cost.recurrence_group_id
        )
    else:
        queryset = CostDefinition.objects.filter(id=cost.id)

    deleted = queryset.count()
    queryset.delete()

    logger.info(
        "Deleted %d cost definition(s) starting from %s for owner %s",
        deleted, cost_id, owner.id
    )
    return deleted
