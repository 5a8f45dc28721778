import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

CONTACT_NUMBER_REGEX = re.compile(r"^\+?\d{7,15}$")
SEPARATORS = re.compile(r"[\s\-().]")


def normalize_contact_number(value: str) -> str:
    """Drop separators and turn a leading 00 international prefix into +.

    "+91 (987) 654-3210" and "0091.9876543210" both become "+919876543210".
    """
    number = SEPARATORS.sub("", value)
    if number.startswith("00"):
        number = "+" + number[2:]
    return number


def validate_contact_number(value: str | None) -> None:
    """Accept 7 to 15 digits with an optional leading +, after normalization."""
    if value is None:
        return
    if not isinstance(value, str):
        raise ValidationError(_("Contact number must be text."), code="invalid_type")
    if not CONTACT_NUMBER_REGEX.fullmatch(normalize_contact_number(value)):
        raise ValidationError(
            _("Enter a contact number of 7 to 15 digits, optionally starting with +."), code="invalid"
        )
