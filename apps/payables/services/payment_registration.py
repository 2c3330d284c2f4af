"""
Payment registration service.

Records a full or partial payment against an obligation, either by editing
an existing payment row or by snapshotting a cost definition into a new one.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.accounts.models import User
from apps.costs.models import CostDefinition
from apps.payables.models import PaymentRecord, PaymentStatus

from .exceptions import (
    CostDefinitionNotFoundError,
    InvalidPaymentAmountError,
    InvalidPaymentTargetError,
    PaymentNotFoundError,
)


logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def compute_paid_status(*, amount_paid: Decimal, amount_original: Decimal) -> str:
    """
    ``partially_paid`` when less than the original amount was paid, otherwise
    ``paid`` (overpaying is still just paid).
    """
    if amount_paid < amount_original:
        return PaymentStatus.PARTIALLY_PAID.value
    return PaymentStatus.PAID.value


def _parse_amount(value) -> Decimal:
    if value is None or isinstance(value, bool):
        raise InvalidPaymentAmountError("Paid amount is required")

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidPaymentAmountError(f"Paid amount is not a number: {value!r}")

    if not amount.is_finite():
        raise InvalidPaymentAmountError(f"Paid amount is not a number: {value!r}")
    if amount < 0:
        raise InvalidPaymentAmountError("Paid amount cannot be negative")

    # Rounded to the stored precision before any status is derived.
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidPaymentAmountError(f"Paid amount is too large: {value!r}")


def _apply_payment(payment: PaymentRecord, amount: Decimal, now: datetime) -> PaymentRecord:
    payment.amount_paid = amount
    payment.payment_date = now
    payment.status = compute_paid_status(
        amount_paid=amount,
        amount_original=payment.amount_original
    )
    payment.save(update_fields=['amount_paid', 'payment_date', 'status', 'updated_at'])
    return payment


def _get_obligation_payment(owner, definition, due_date):
    return (
        PaymentRecord.objects
        .select_for_update()
        .filter(owner=owner, cost_definition=definition, due_date=due_date)
        .first()
    )


def _update_obligation_payment(payment, definition, amount, now):
    _apply_payment(payment, amount, now)
    logger.info(
        "Updated existing payment %s for cost %s: %s (%s)",
        payment.id, definition.id, amount, payment.status
    )
    return payment


def register_payment(
    *,
    owner: User,
    amount_paid,
    payment_id: Optional[UUID] = None,
    cost_definition_id: Optional[UUID] = None,
    due_date: Optional[date] = None,
    now: Optional[datetime] = None
) -> PaymentRecord:
    """
    Register a payment against a payable item.

    With ``payment_id`` the existing row is updated in place; resubmitting
    simply overwrites the amount, date and status. With
    ``cost_definition_id`` a new row is created from the definition's
    current description and value. If that obligation (same definition and
    due date) already has a row, the row is updated instead, so an
    obligation never ends up with two payments.

    The amount is validated and rounded half-up to cents before anything is
    written. Everything runs in one transaction with the target row locked;
    if another request creates the same obligation first, that row is
    updated instead (last write wins).

    Args:
        owner: Tenant registering the payment
        amount_paid: Paid amount (Decimal, number or numeric string, >= 0)
        payment_id: Existing payment to update
        cost_definition_id: Definition to pay (virtual item)
        due_date: Due date of the obligation (default: the definition's
            expense date)
        now: Payment timestamp (default: current time)

    Returns:
        Saved PaymentRecord

    Raises:
        InvalidPaymentAmountError: If the amount is missing, non-numeric or
            negative
        InvalidPaymentTargetError: If neither payment_id nor
            cost_definition_id is given, or the obligation has no due date
        PaymentNotFoundError: If the payment doesn't exist or belongs to
            someone else
        CostDefinitionNotFoundError: If the definition doesn't exist or
            belongs to someone else
    """
    try:
        amount = _parse_amount(amount_paid)
    except InvalidPaymentAmountError:
        logger.warning("Rejected payment amount %r for owner %s", amount_paid, owner.id)
        raise

    if payment_id is None and cost_definition_id is None:
        raise InvalidPaymentTargetError("Provide a payment or a cost definition to pay")

    now = now or timezone.now()

    with transaction.atomic():
        if payment_id is not None:
            try:
                payment = (
                    PaymentRecord.objects
                    .select_for_update()
                    .get(id=payment_id, owner=owner)
                )
            except PaymentRecord.DoesNotExist:
                raise PaymentNotFoundError(f"Payment with ID {payment_id} not found")

            _apply_payment(payment, amount, now)
            logger.info(
                "Updated payment %s for owner %s: %s (%s)",
                payment.id, owner.id, amount, payment.status
            )
            return payment

        try:
            definition = CostDefinition.objects.get(id=cost_definition_id, owner=owner)
        except CostDefinition.DoesNotExist:
            raise CostDefinitionNotFoundError(
                f"Cost with ID {cost_definition_id} not found"
            )

        due_date = due_date or definition.expense_date
        if due_date is None:
            raise InvalidPaymentTargetError("The obligation has no due date")

        existing = _get_obligation_payment(owner, definition, due_date)
        if existing is not None:
            return _update_obligation_payment(existing, definition, amount, now)

        try:
            # Savepoint keeps the outer transaction usable after a unique violation
            with transaction.atomic():
                payment = PaymentRecord.objects.create(
                    owner=owner,
                    cost_definition=definition,
                    description=definition.description,
                    due_date=due_date,
                    amount_original=definition.value,
                    amount_paid=amount,
                    payment_date=now,
                    status=compute_paid_status(
                        amount_paid=amount,
                        amount_original=definition.value
                    ),
                )
        except IntegrityError:
            existing = _get_obligation_payment(owner, definition, due_date)
            if existing is None:
                raise
            logger.info(
                "Payment for cost %s due %s was created concurrently, updating it",
                definition.id, due_date
            )
            return _update_obligation_payment(existing, definition, amount, now)

    logger.info(
        "Registered payment %s for cost %s (owner %s): %s (%s)",
        payment.id, definition.id, owner.id, amount, payment.status
    )
    return payment
