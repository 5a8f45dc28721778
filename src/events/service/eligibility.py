"""Registration eligibility and capacity evaluation.

The evaluator is a pure decision function composed of ordered gates. Each gate
either blocks with a reason or lets the next gate run; the first block wins.
"""

from __future__ import annotations

import abc
import typing as t
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from accounts.models import ParticipantProfile
from events.models import Event, MerchandiseEvent, NormalEvent, Participation


class Reasons(StrEnum):
    DEADLINE_PASSED = "deadline passed"
    NOT_ELIGIBLE = "not eligible"
    INVALID_SELECTION = "invalid selection"
    MISSING_FIELD = "missing field {name}"
    LIMIT_REACHED = "limit reached"
    ALREADY_REGISTERED = "already registered"


class Issuance(StrEnum):
    IMMEDIATE = "immediate"
    AWAIT_PAYMENT = "await_payment"


class Admission(BaseModel):
    """Outcome of an evaluation."""

    allowed: bool
    event_id: uuid.UUID
    reason: str | None = None
    issuance: Issuance | None = None


@dataclass(frozen=True)
class RegistrationContext:
    event: Event
    profile: ParticipantProfile | None
    existing_participation: Participation | None
    current_active_count: int
    now: datetime
    merchandise_selection: dict[str, t.Any] | None = None
    custom_field_responses: list[dict[str, t.Any]] | None = None


def _is_blank(value: t.Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None or value == [] or value == {}


class BaseRegistrationGate(abc.ABC):
    """Abstract Base Class for a composable registration check."""

    def __init__(self, context: RegistrationContext) -> None:
        """Initialize the check."""
        self.context = context
        self.event = context.event

    def reject(self, reason: str) -> Admission:
        return Admission(allowed=False, event_id=self.event.id, reason=str(reason))

    @abc.abstractmethod
    def check(self) -> Admission | None:
        """Perform the check.

        Returns:
            Admission if this gate blocks registration, None to continue to the next gate.
        """


class DeadlineGate(BaseRegistrationGate):
    """Gate #1: the registration deadline has not passed."""

    def check(self) -> Admission | None:
        if self.context.now > self.event.registration_deadline:
            return self.reject(Reasons.DEADLINE_PASSED)
        return None


class ParticipantTypeGate(BaseRegistrationGate):
    """Gate #2: the participant's type matches the event's eligibility.

    A missing profile fails any restricted event.
    """

    REQUIRED_TYPE = {
        Event.Eligibility.IIIT_ONLY: ParticipantProfile.ParticipantType.IIIT,
        Event.Eligibility.NON_IIIT_ONLY: ParticipantProfile.ParticipantType.NON_IIIT,
    }

    def check(self) -> Admission | None:
        required = self.REQUIRED_TYPE.get(t.cast(Event.Eligibility, self.event.eligibility))
        if required is None:
            return None
        profile = self.context.profile
        if profile is None or profile.participant_type != required:
            return self.reject(Reasons.NOT_ELIGIBLE)
        return None


class MerchandiseSelectionGate(BaseRegistrationGate):
    """Gate #3: a merchandise registration names a size and a color from the offered sets."""

    def check(self) -> Admission | None:
        match self.event.kind:
            case MerchandiseEvent(options=options):
                selection = self.context.merchandise_selection or {}
                size = str(selection.get("size") or "").strip()
                color = str(selection.get("color") or "").strip()
                if not size or not color:
                    return self.reject(Reasons.INVALID_SELECTION)
                if options.sizes and size not in options.sizes:
                    return self.reject(Reasons.INVALID_SELECTION)
                if options.colors and color not in options.colors:
                    return self.reject(Reasons.INVALID_SELECTION)
            case NormalEvent():
                pass
        return None


class RequiredFieldsGate(BaseRegistrationGate):
    """Gate #4: every required custom form field of a normal event has a non-empty answer."""

    def check(self) -> Admission | None:
        match self.event.kind:
            case NormalEvent() as normal:
                answered = {
                    str(r.get("name")): r.get("value")
                    for r in self.context.custom_field_responses or []
                    if isinstance(r, dict)
                }
                for name in normal.required_fields:
                    if _is_blank(answered.get(name)):
                        return self.reject(Reasons.MISSING_FIELD.format(name=name))
            case MerchandiseEvent():
                pass
        return None


class CapacityGate(BaseRegistrationGate):
    """Gate #5: a limited event still has a free slot."""

    def check(self) -> Admission | None:
        limit = self.event.registration_limit
        if limit > 0 and self.context.current_active_count >= limit:
            return self.reject(Reasons.LIMIT_REACHED)
        return None


class DuplicateGate(BaseRegistrationGate):
    """Gate #6: the participant does not already hold an active registration."""

    def check(self) -> Admission | None:
        if self.context.existing_participation is not None:
            return self.reject(Reasons.ALREADY_REGISTERED)
        return None


REGISTRATION_GATES: list[type[BaseRegistrationGate]] = [
    DeadlineGate,
    ParticipantTypeGate,
    MerchandiseSelectionGate,
    RequiredFieldsGate,
    CapacityGate,
    DuplicateGate,
]


def issuance_for(event: Event) -> Issuance:
    match event.kind:
        case MerchandiseEvent():
            return Issuance.AWAIT_PAYMENT
        case NormalEvent():
            return Issuance.IMMEDIATE


def evaluate(
    event: Event,
    profile: ParticipantProfile | None,
    existing_participation: Participation | None,
    current_active_count: int,
    now: datetime,
    merchandise_selection: dict[str, t.Any] | None = None,
    custom_field_responses: list[dict[str, t.Any]] | None = None,
) -> Admission:
    """Decide whether a participant may register. Side-effect free."""
    context = RegistrationContext(
        event=event,
        profile=profile,
        existing_participation=existing_participation,
        current_active_count=current_active_count,
        now=now,
        merchandise_selection=merchandise_selection,
        custom_field_responses=custom_field_responses,
    )
    for gate_class in REGISTRATION_GATES:
        if admission := gate_class(context).check():
            return admission
    return Admission(allowed=True, event_id=event.id, issuance=issuance_for(event))
