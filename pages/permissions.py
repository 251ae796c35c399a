# pages/permissions.py
from rest_framework.permissions import BasePermission


class IsPageAdmin(BasePermission):
    """
    Admin scope for the page management API: staff users, or anyone
    holding the pages.change_page permission.
    """

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_staff or user.is_superuser or user.has_perm("pages.change_page")
