"""
Role based access control on top of :class:`clinic.authentication.BackendUser`.
"""
from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsProvider(BasePermission):
    """Allow access only to provider accounts."""
    message = 'This endpoint is only available to providers'

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and getattr(user, "user_type", None) == "provider")


class IsProviderOrReadOnly(BasePermission):
    """Anyone signed in may read; only providers may write."""
    message = IsProvider.message

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method in SAFE_METHODS:
            return True
        return IsProvider().has_permission(request, view)
