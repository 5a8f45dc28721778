"""
Project-wide fixtures: users for every role, a normal and a merchandise event,
and authenticated API clients.
"""

import typing as t
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import FelicityUser, ParticipantProfile
from common.testing import FelicityUserFactory
from events.models import Event


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    """Increase the rate limits for the write and upload throttles to allow testing."""
    monkeypatch.setattr("common.throttling.WriteThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.PaymentProofThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.UserDefaultThrottle.rate", "1000/min")


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Enable Celery eager mode for tests so tasks execute synchronously."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()


@pytest.fixture
def user_factory() -> FelicityUserFactory:
    return FelicityUserFactory()


@pytest.fixture
def organizer(user_factory: FelicityUserFactory) -> FelicityUser:
    return user_factory(role=FelicityUser.Role.ORGANIZER, first_name="Olga", last_name="Organizer")


@pytest.fixture
def other_organizer(user_factory: FelicityUserFactory) -> FelicityUser:
    return user_factory(role=FelicityUser.Role.ORGANIZER)


@pytest.fixture
def platform_admin(user_factory: FelicityUserFactory) -> FelicityUser:
    return user_factory(role=FelicityUser.Role.ADMIN)


@pytest.fixture
def participant(user_factory: FelicityUserFactory) -> FelicityUser:
    """An IIIT participant with a contact number."""
    user = user_factory(role=FelicityUser.Role.PARTICIPANT, first_name="Priya", last_name="Participant")
    ParticipantProfile.objects.create(
        user=user,
        participant_type=ParticipantProfile.ParticipantType.IIIT,
        contact_number="+91 98765 43210",
        college_or_org="IIIT Hyderabad",
    )
    return user


@pytest.fixture
def other_participant(user_factory: FelicityUserFactory) -> FelicityUser:
    """A non-IIIT participant."""
    user = user_factory(role=FelicityUser.Role.PARTICIPANT)
    ParticipantProfile.objects.create(user=user, participant_type=ParticipantProfile.ParticipantType.NON_IIIT)
    return user


@pytest.fixture
def normal_event(organizer: FelicityUser) -> Event:
    now = timezone.now()
    return Event.objects.create(
        organizer=organizer,
        name="Hackathon",
        event_type=Event.EventType.NORMAL,
        eligibility=Event.Eligibility.ALL,
        status=Event.EventStatus.PUBLISHED,
        registration_deadline=now + timedelta(days=5),
        start=now + timedelta(days=7),
        end=now + timedelta(days=8),
    )


@pytest.fixture
def merch_event(organizer: FelicityUser) -> Event:
    now = timezone.now()
    return Event.objects.create(
        organizer=organizer,
        name="Felicity T-Shirt",
        event_type=Event.EventType.MERCHANDISE,
        eligibility=Event.Eligibility.ALL,
        status=Event.EventStatus.PUBLISHED,
        registration_deadline=now + timedelta(days=5),
        start=now + timedelta(days=7),
        registration_fee=Decimal("500"),
        merchandise_options={"sizes": ["M", "L"], "colors": ["Black"], "stock": 10, "purchase_limit_per_user": 3},
    )


def _client_for(user: FelicityUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {str(refresh.access_token)}")  # type: ignore[attr-defined]


@pytest.fixture
def participant_client(participant: FelicityUser) -> Client:
    return _client_for(participant)


@pytest.fixture
def other_participant_client(other_participant: FelicityUser) -> Client:
    return _client_for(other_participant)


@pytest.fixture
def organizer_client(organizer: FelicityUser) -> Client:
    return _client_for(organizer)


@pytest.fixture
def other_organizer_client(other_organizer: FelicityUser) -> Client:
    return _client_for(other_organizer)


@pytest.fixture
def admin_client_jwt(platform_admin: FelicityUser) -> Client:
    return _client_for(platform_admin)
