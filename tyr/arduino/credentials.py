"""LoRaWAN OTAA credential validation.

Credentials are checked field by field before any toolchain command is
run; the first invalid field aborts the operation.
"""

from dataclasses import dataclass

from tyr.errors import InvalidCredentialLengthError

# Hex string lengths expected by the LoRaWAN sketches
CREDENTIAL_LENGTHS = {"deveui": 16, "appeui": 16, "appkey": 32}

CREDENTIAL_DEFINES = {
    "deveui": "-DLORAWAN_DEVEUI=",
    "appeui": "-DLORAWAN_APPEUI=",
    "appkey": "-DLORAWAN_APPKEY=",
}


@dataclass
class LoRaWANCredentials:
    """OTAA join credentials of a device."""

    deveui: str = ""
    appeui: str = ""
    appkey: str = ""


def validate_credentials(credentials: LoRaWANCredentials) -> None:
    """Check credential lengths in deveui, appeui, appkey order.

    Raises:
        InvalidCredentialLengthError: For the first field with a wrong length.
    """
    for name, expected in CREDENTIAL_LENGTHS.items():
        value = getattr(credentials, name)
        if len(value) != expected:
            raise InvalidCredentialLengthError(name, expected, len(value))


def compose_credential_flags(credentials: LoRaWANCredentials) -> str:
    """Validate credentials and render them as compiler defines."""
    validate_credentials(credentials)
    return "".join(
        f"{prefix}{getattr(credentials, name)} "
        for name, prefix in CREDENTIAL_DEFINES.items()
    )


__all__ = [
    "CREDENTIAL_LENGTHS",
    "LoRaWANCredentials",
    "compose_credential_flags",
    "validate_credentials",
]
