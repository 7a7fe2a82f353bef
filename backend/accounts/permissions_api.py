from rest_framework import permissions

from accounts.principal import Principal, ADMIN, FACULTY, STUDENT


class HasRole(permissions.BasePermission):
    """Checks the principal role against ``allowed_roles``.

    A view may narrow individual methods with
    ``required_roles = {'POST': (ADMIN, FACULTY)}``; other methods fall back
    to the permission's ``allowed_roles``.
    """

    allowed_roles: tuple = (ADMIN, FACULTY, STUDENT)

    def has_permission(self, request, view):
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return False

        per_method = getattr(view, 'required_roles', None) or {}
        allowed = per_method.get(request.method, self.allowed_roles)
        return Principal.from_user(user).role in allowed


class IsAdminRole(HasRole):
    allowed_roles = (ADMIN,)


class IsFacultyOrAdmin(HasRole):
    allowed_roles = (ADMIN, FACULTY)
