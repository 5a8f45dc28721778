"""Base authentication classes for the Felicity API."""

import typing as t

import structlog
from django.contrib.auth.models import AnonymousUser
from django.http import HttpRequest
from django.utils.translation import gettext_lazy as _
from ninja_extra import status
from ninja_extra.exceptions import APIException
from ninja_jwt.authentication import JWTAuth


class PermissionDenied(APIException):
    """Exception raised when user doesn't have required permissions."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = _("Permission denied")


class RoleJWTAuth(JWTAuth):
    """JWT authentication that also restricts access to a set of platform roles.

    Superusers always pass the role check.
    """

    def __init__(self, *, roles: t.Iterable[str] | None = None) -> None:
        """Initialize the RoleJWTAuth authentication class.

        Args:
            roles: The roles allowed through. ``None`` accepts any authenticated user.
        """
        self.roles = frozenset(roles) if roles is not None else None
        super().__init__()

    def authenticate(self, request: HttpRequest, token: str) -> t.Any:
        """Authenticate and verify the user's role.

        Raises:
            PermissionDenied: If the user's role is not allowed.
        """
        user = super().authenticate(request, token)
        if user and not isinstance(user, AnonymousUser):
            structlog.contextvars.bind_contextvars(user_id=str(user.pk), role=getattr(user, "role", None))

        if user and not isinstance(user, AnonymousUser) and self.roles is not None:
            if not getattr(user, "is_superuser", False) and getattr(user, "role", None) not in self.roles:
                raise PermissionDenied(str(_("Your role does not allow this action.")))

        return user
