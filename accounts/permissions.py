from rest_framework.permissions import BasePermission, SAFE_METHODS


def _role(request):
    user = request.user
    if not user or not user.is_authenticated:
        return None
    return getattr(user, "role", None)


class IsAdminOrStaff(BasePermission):
    """Any signed-in restaurant user (staff, admin or developer)."""

    def has_permission(self, request, view):
        return _role(request) in ("STAFF", "ADMIN", "DEVELOPER")


class IsAdminRole(BasePermission):
    """Admins and developers."""

    def has_permission(self, request, view):
        return _role(request) in ("ADMIN", "DEVELOPER")


class IsDeveloperRole(BasePermission):

    def has_permission(self, request, view):
        return _role(request) == "DEVELOPER"


class ReadOnlyOrAdminRole(BasePermission):
    """Anyone may read; only admins may write."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return _role(request) in ("ADMIN", "DEVELOPER")
