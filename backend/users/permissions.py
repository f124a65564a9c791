from rest_framework.permissions import BasePermission

from .models import UserRole


class RolePermission(BasePermission):
    """Allow authenticated users whose role is in ``allowed_roles``; superusers always pass."""

    allowed_roles = ()

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.is_superuser or getattr(user, "role", None) in self.allowed_roles


class IsAdminUserRole(RolePermission):
    allowed_roles = (UserRole.ADMIN,)


class IsStaffOrAdminRole(RolePermission):
    allowed_roles = (UserRole.STAFF, UserRole.ADMIN)
