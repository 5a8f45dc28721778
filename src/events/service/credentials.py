"""Ticket credential codec.

A credential is a small JSON document embedded in a QR code. It is verifiable by
field presence only; there is no signature.
"""

import base64
import io
import typing as t
from datetime import datetime

import orjson
import qrcode
from django.conf import settings
from django.utils import timezone
from pydantic import BaseModel, ConfigDict, Field, ValidatorFunctionWrapHandler, field_validator
from pydantic import ValidationError as PydanticValidationError
from qrcode.constants import ERROR_CORRECT_H

from events.exceptions import CodecError


class CredentialPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ticket_id: str = Field(alias="ticketId")
    participant_email: str = Field(alias="participantEmail")
    event_name: str = Field(alias="eventName")
    generated_at: datetime | None = Field(default=None, alias="generatedAt")
    valid: t.Any = None

    @field_validator("generated_at", mode="wrap")
    @classmethod
    def lenient_generated_at(cls, value: t.Any, handler: ValidatorFunctionWrapHandler) -> datetime | None:
        """An unreadable timestamp decodes as None."""
        try:
            return t.cast(datetime | None, handler(value))
        except PydanticValidationError:
            return None


def encode(ticket_id: str, participant_email: str, event_name: str) -> CredentialPayload:
    """Build a fresh credential payload."""
    return CredentialPayload(
        ticket_id=ticket_id,
        participant_email=participant_email,
        event_name=event_name,
        generated_at=timezone.now(),
        valid=True,
    )


def serialize(payload: CredentialPayload) -> str:
    """Serialize a payload to the compact JSON text embedded in the QR code.

    Raises:
        CodecError: if the payload exceeds CREDENTIAL_MAX_PAYLOAD_BYTES.
    """
    raw = orjson.dumps(payload.model_dump(mode="json", by_alias=True))
    if len(raw) > settings.CREDENTIAL_MAX_PAYLOAD_BYTES:
        raise CodecError("credential payload too large")
    return raw.decode()


def render(payload: CredentialPayload) -> str:
    """Render the payload as a QR code and return it as a PNG data URL."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_H, border=1, box_size=10)
    qr.add_data(serialize(payload))
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode()


def decode(raw: str | bytes) -> CredentialPayload:
    """Parse scanned credential text.

    Raises:
        CodecError: if the text is not JSON or lacks ticketId, participantEmail or eventName.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise CodecError("invalid format") from e
    if not isinstance(data, dict):
        raise CodecError("invalid format")
    try:
        return CredentialPayload.model_validate(data)
    except PydanticValidationError as e:
        raise CodecError("invalid format") from e


def verify(payload: CredentialPayload) -> bool:
    """Structural check: identifiers present and the validity flag is exactly True."""
    return bool(payload.ticket_id) and bool(payload.participant_email) and payload.valid is True
