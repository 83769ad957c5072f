"""Arduino family support.

This module handles:
- arduino-cli install checks and board listing
- Compiling per-device firmware images
- LoRaWAN credential validation
"""

from tyr.arduino.credentials import (
    CREDENTIAL_LENGTHS,
    LoRaWANCredentials,
    compose_credential_flags,
    validate_credentials,
)
from tyr.arduino.toolchain import (
    INSTALL_URL,
    check_toolchain_install,
    compile_image,
    compose_compile_command,
    list_boards,
)

__all__ = [
    "CREDENTIAL_LENGTHS",
    "INSTALL_URL",
    "LoRaWANCredentials",
    "check_toolchain_install",
    "compile_image",
    "compose_compile_command",
    "compose_credential_flags",
    "list_boards",
    "validate_credentials",
]
