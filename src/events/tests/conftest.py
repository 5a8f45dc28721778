import pytest

from accounts.models import FelicityUser
from events.models import Event, Order, Participation, Payment
from events.service import payment_service, registration_service


@pytest.fixture
def registration(participant: FelicityUser, normal_event: Event) -> Participation:
    """A registration with an issued ticket."""
    return registration_service.register(participant, normal_event)


@pytest.fixture
def merch_registration(participant: FelicityUser, merch_event: Event) -> Participation:
    """A merchandise registration awaiting payment."""
    return registration_service.register(participant, merch_event, merchandise_selection={"size": "M", "color": "Black"})


@pytest.fixture
def order(participant: FelicityUser, merch_event: Event, merch_registration: Participation) -> Order:
    return payment_service.create_order(participant, merch_event, 2)


@pytest.fixture
def payment(participant: FelicityUser, order: Order) -> Payment:
    return payment_service.upload_proof(order, participant, Payment.PaymentMethod.UPI, "data:image/png;base64,AAAA")
