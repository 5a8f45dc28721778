from decouple import config

# Ticket ids look like FEL-1A2B3C-482913
TICKET_ID_PREFIX = config("TICKET_ID_PREFIX", default="FEL")
TICKET_ID_MAX_ATTEMPTS = config("TICKET_ID_MAX_ATTEMPTS", default=10, cast=int)

# QR version 40 with error correction H holds 1273 bytes
CREDENTIAL_MAX_PAYLOAD_BYTES = config("CREDENTIAL_MAX_PAYLOAD_BYTES", default=1200, cast=int)

MANUAL_CHECK_IN_MIN_REASON_LENGTH = config("MANUAL_CHECK_IN_MIN_REASON_LENGTH", default=10, cast=int)
