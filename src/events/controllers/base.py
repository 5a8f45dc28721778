import typing as t
from uuid import UUID

from django.db.models import Model, QuerySet

from accounts.models import FelicityUser
from common.auth_base import RoleJWTAuth
from common.controllers import UserAwareController
from common.schema import ErrorResponse
from events.exceptions import NotFoundError

M = t.TypeVar("M", bound=Model)

Role = FelicityUser.Role

ParticipantAuth = RoleJWTAuth(roles=[Role.PARTICIPANT])
OrganizerAuth = RoleJWTAuth(roles=[Role.ORGANIZER])
ReviewerAuth = RoleJWTAuth(roles=[Role.ORGANIZER, Role.ADMIN])
CancelAuth = RoleJWTAuth(roles=[Role.PARTICIPANT, Role.ADMIN])
AnyRoleAuth = RoleJWTAuth()

ERROR_RESPONSES: dict[int, type[ErrorResponse]] = {400: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse}


class TicketingController(UserAwareController):
    """Base controller for the ticketing endpoints."""

    def get_or_not_found(self, queryset: QuerySet[M], label: str, pk: UUID) -> M:
        """Fetch one object or raise NotFoundError naming what was missing."""
        obj = queryset.filter(pk=pk).first()
        if obj is None:
            raise NotFoundError(f"{label} not found")
        return obj
