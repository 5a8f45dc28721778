"""Errors raised by the ticketing core.

Each error carries the HTTP status it maps to and optional machine-readable flags
that the API returns alongside the message.
"""

import typing as t


class TicketingError(Exception):
    """Base class for every ticketing failure surfaced to clients."""

    status_code: int = 400

    def __init__(self, message: str, **flags: t.Any) -> None:
        """Initialize the error with a message and extra response fields."""
        super().__init__(message)
        self.message = message
        self.flags = flags

    def to_response(self) -> dict[str, t.Any]:
        return {"detail": self.message, **self.flags}


class ValidationError(TicketingError):
    """Malformed or inconsistent input."""


class EligibilityError(TicketingError):
    """A registration or cancellation rule rejected the request."""


class AuthorizationError(TicketingError):
    """The principal may not act on this resource."""

    status_code = 403


class NotFoundError(TicketingError):
    """An unknown ticket, order, payment or participation."""

    status_code = 404


class ConflictError(TicketingError):
    """The resource already moved past the requested transition."""


class CodecError(TicketingError):
    """A credential could not be encoded or decoded."""


class DependencyError(Exception):
    """A side channel (image rendering, notification) failed. Logged, never surfaced."""
