"""
HTTP exceptions for payables app.

Views translate the domain exceptions in ``services.exceptions`` into these.
"""
from rest_framework.exceptions import APIException


class PaymentNotFound(APIException):
    """Payment not found (or owned by someone else)."""
    status_code = 404
    default_detail = 'Payment not found.'
    default_code = 'payment_not_found'


class CostDefinitionNotFound(APIException):
    """Cost being paid was not found."""
    status_code = 404
    default_detail = 'Cost not found.'
    default_code = 'cost_not_found'


class InvalidPaymentAmount(APIException):
    """Paid amount is missing, non-numeric or negative."""
    status_code = 400
    default_detail = 'Invalid paid amount.'
    default_code = 'invalid_payment_amount'


class InvalidPaymentTarget(APIException):
    """Registration names nothing to pay."""
    status_code = 400
    default_detail = 'Nothing to pay.'
    default_code = 'invalid_payment_target'
