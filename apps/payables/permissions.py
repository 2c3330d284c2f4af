"""
Custom permission classes for payables app.

Permission Classes:
    IsPaymentOwner - Object access limited to the tenant owning the payment
"""
from rest_framework.permissions import BasePermission


class IsPaymentOwner(BasePermission):
    """Permission to access a payment row."""

    message = 'You can only access your own payments.'

    def has_object_permission(self, request, view, obj):
        return obj.owner_id == request.user.id
