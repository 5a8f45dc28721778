import pytest
from django.core.exceptions import ValidationError

from accounts.models import FelicityUser, ParticipantProfile
from accounts.validators import normalize_contact_number, validate_contact_number


def test_contact_number_must_be_text() -> None:
    with pytest.raises(ValidationError, match="Contact number must be text."):
        validate_contact_number(123)  # type: ignore[arg-type]


@pytest.mark.parametrize("value", ["123", "call me", "+91 98765 43210 ext 4", "+" + "1" * 16])
def test_invalid_contact_numbers(value: str) -> None:
    with pytest.raises(ValidationError, match="7 to 15 digits"):
        validate_contact_number(value)


@pytest.mark.parametrize("value", ["+919876543210", "98765 43210", "0091.98765.43210", None])
def test_valid_contact_numbers(value: str | None) -> None:
    validate_contact_number(value)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("+91 (987) 654-3210", "+919876543210"),
        ("0091.9876543210", "+919876543210"),
        ("040-2300 1967", "04023001967"),
    ],
)
def test_normalize_contact_number(raw: str, expected: str) -> None:
    assert normalize_contact_number(raw) == expected


@pytest.mark.django_db
def test_contact_number_is_normalized() -> None:
    user = FelicityUser.objects.create_user(username="with_number", password="<PASSWORD>")

    profile = ParticipantProfile.objects.create(
        user=user, participant_type=ParticipantProfile.ParticipantType.IIIT, contact_number="+91 (987) 654-3210"
    )

    assert profile.contact_number == "+919876543210"


@pytest.mark.django_db
def test_contact_number_is_optional() -> None:
    user = FelicityUser.objects.create_user(username="no_number", password="<PASSWORD>")

    profile = ParticipantProfile.objects.create(user=user, participant_type=ParticipantProfile.ParticipantType.NON_IIIT)

    assert profile.contact_number is None


@pytest.mark.django_db
def test_invalid_contact_number_is_rejected() -> None:
    user = FelicityUser.objects.create_user(username="bad_number", password="<PASSWORD>")

    with pytest.raises(ValidationError):
        ParticipantProfile.objects.create(
            user=user, participant_type=ParticipantProfile.ParticipantType.IIIT, contact_number="call me"
        )
