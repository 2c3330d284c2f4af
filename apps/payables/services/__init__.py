"""
Payables app services layer.

Services contain business logic and orchestrate operations across models.
Reads never write; payment registration runs in a transaction.
"""

from .exceptions import (
    PayablesServiceError,
    PaymentNotFoundError,
    CostDefinitionNotFoundError,
    InvalidPaymentAmountError,
    InvalidPaymentTargetError,
    InvalidStatusFilterError,
)

from .ledger import (
    get_payments_for_month,
)

from .reconciliation import (
    PayableItem,
    DueAlert,
    STATUS_BUCKETS,
    build_payable_items,
    derive_payment_status,
    filter_payable_items,
    summarize_payable_items,
    get_payables_for_month,
    get_due_alerts,
)

from .payment_registration import (
    compute_paid_status,
    register_payment,
)


__all__ = [
    # Exceptions
    'PayablesServiceError',
    'PaymentNotFoundError',
    'CostDefinitionNotFoundError',
    'InvalidPaymentAmountError',
    'InvalidPaymentTargetError',
    'InvalidStatusFilterError',

    # Ledger
    'get_payments_for_month',

    # Reconciliation
    'PayableItem',
    'DueAlert',
    'STATUS_BUCKETS',
    'build_payable_items',
    'derive_payment_status',
    'filter_payable_items',
    'summarize_payable_items',
    'get_payables_for_month',
    'get_due_alerts',

    # Payment Registration
    'compute_paid_status',
    'register_payment',
]
