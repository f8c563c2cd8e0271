"""
Role-based permission classes.

Every authenticated user carries exactly one platform role. Views combine
these with ``IsAuthenticated`` to gate role-specific endpoints.
"""
from rest_framework import permissions

from .models import UserRole


class HasRole(permissions.BasePermission):
    """
    Base permission: user's role must be in ``allowed_roles``.
    """

    allowed_roles = ()
    message = 'Your account role cannot perform this action.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


class IsCustomer(HasRole):
    allowed_roles = (UserRole.CUSTOMER,)
    message = 'Only customers can perform this action.'


class IsShop(HasRole):
    allowed_roles = (UserRole.SHOP,)
    message = 'Only shops can perform this action.'


class IsRider(HasRole):
    allowed_roles = (UserRole.RIDER,)
    message = 'Only riders can perform this action.'


class IsAdminRole(HasRole):
    allowed_roles = (UserRole.ADMIN,)
    message = 'Only platform admins can perform this action.'
