"""
Custom permission classes for collection app.

Items are private: only the owning account may see or change them.
"""
from rest_framework.permissions import BasePermission


class IsItemOwner(BasePermission):
    """
    Permission to check that the item belongs to the requesting user.

    Usage:
        permission_classes = [IsAuthenticated, IsItemOwner]
    """

    message = 'You can only access items of your own collection.'

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.pk
