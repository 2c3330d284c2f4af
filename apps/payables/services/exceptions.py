"""
Domain-specific exceptions for payables app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PayablesServiceError(Exception):
    """Base exception for all payables service errors."""
    pass


class PaymentNotFoundError(PayablesServiceError):
    """Raised when a payment does not exist or belongs to another owner."""
    pass


class CostDefinitionNotFoundError(PayablesServiceError):
    """Raised when paying a cost definition that does not exist."""
    pass


class InvalidPaymentAmountError(PayablesServiceError):
    """Raised when a paid amount is missing, non-numeric or negative."""
    pass


class InvalidPaymentTargetError(PayablesServiceError):
    """Raised when a registration names neither a payment nor a cost."""
    pass


class InvalidStatusFilterError(PayablesServiceError):
    """Raised when filtering by an unknown status bucket."""
    pass
