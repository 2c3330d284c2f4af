"""
Custom permission classes for costs app.

Permission Classes:
    IsCostOwner - Object access limited to the tenant owning the row
"""
from rest_framework.permissions import BasePermission


class IsCostOwner(BasePermission):
    """
    Permission to access a cost row (definition, schedule or profile).

    Querysets are already filtered by owner, so this is the object-level
    backstop for rows fetched any other way.
    """

    message = 'You can only access your own costs.'

    def has_object_permission(self, request, view, obj):
        return obj.owner_id == request.user.id
