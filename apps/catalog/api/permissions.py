from django.conf import settings
from rest_framework import permissions


class IsCatalogAdmin(permissions.BasePermission):
    """Caller holds a verified token whose role is in CATALOG_ADMIN_ROLES."""
    message = 'Your role is not allowed to manage the catalog.'

    def has_permission(self, request, view):
        user = request.user
        if not user or not getattr(user, 'is_authenticated', False):
            return False
        return getattr(user, 'role', None) in settings.CATALOG_ADMIN_ROLES
