"""arduino-cli toolchain integration.

This module handles:
- Checking that arduino-cli is installed
- Listing connected boards
- Composing and running ``arduino-cli compile`` for a device

The configured ``cli_path`` is used for every invocation.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from tyr.arduino.credentials import compose_credential_flags
from tyr.devices.flags import assemble_build_flags
from tyr.devices.io import descriptor_path, load_descriptor
from tyr.errors import MissingPathError, SubprocessFailureError, ToolchainMissingError
from tyr.process import run_command, run_json_command

if TYPE_CHECKING:
    from tyr.arduino.credentials import LoRaWANCredentials
    from tyr.config import ArduinoConfig
    from tyr.types import ProcessResult

logger = logging.getLogger(__name__)

INSTALL_URL = "https://arduino.github.io/arduino-cli/latest/installation/"


def check_toolchain_install(arduino: ArduinoConfig) -> dict[str, Any]:
    """Check that arduino-cli can be run.

    Returns:
        Parsed output of ``arduino-cli version --format json``.

    Raises:
        ToolchainMissingError: If the binary is missing or fails.
    """
    message = (
        f"{arduino.cli_path} not found, please download and install it "
        f"from {INSTALL_URL}"
    )
    try:
        result = run_json_command(
            [arduino.cli_path, "version", "--format", "json"], message
        )
    except SubprocessFailureError as e:
        raise ToolchainMissingError(message) from e

    data: dict[str, Any] = result.data if isinstance(result.data, dict) else {}
    logger.debug("Toolchain version info: %s", data)
    return data


def list_boards(arduino: ArduinoConfig) -> ProcessResult:
    """Run ``arduino-cli board list``."""
    return run_command(
        [arduino.cli_path, "board", "list"],
        "No devices found, please connect a device and try again",
    )


def compose_compile_command(
    arduino: ArduinoConfig,
    build_flags: str,
    output_dir: Path,
) -> list[str]:
    """Compose the ``compile`` command for one device.

    Args:
        arduino: Arduino family settings.
        build_flags: Assembled build property, passed as one argument.
        output_dir: Directory receiving the compiled image.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    return [
        arduino.cli_path,
        "compile",
        "-e",
        "-b",
        arduino.board_type,
        "--build-property",
        build_flags,
        "--output-dir",
        str(output_dir),
        arduino.sketch_path,
    ]


def compile_image(
    arduino: ArduinoConfig,
    device_id: str,
    credentials: LoRaWANCredentials | None = None,
) -> ProcessResult:
    """Compile the sketch into a firmware image for one device.

    The output directory ``<devices_path>/<device_id>`` is created before
    compiling and left in place if the compile fails.

    Args:
        arduino: Arduino family settings.
        device_id: Device to build for.
        credentials: Optional LoRaWAN credentials appended as defines.

    Returns:
        ProcessResult of the compile command.

    Raises:
        MissingPathError: If the devices or sketch path does not exist.
        DescriptorNotFoundError: If the device has no descriptor.
        DescriptorParseError: If the descriptor is invalid.
        DeviceIdMismatchError: If the descriptor belongs to another device.
        InvalidCredentialLengthError: If a credential has the wrong length.
        SubprocessFailureError: If the compiler fails.
    """
    credential_flags = ""
    if credentials is not None:
        credential_flags = compose_credential_flags(credentials)

    devices_path = Path(arduino.devices_path)
    logger.debug("devices_path: %s, exists: %s", devices_path, devices_path.exists())
    if not arduino.devices_path or not devices_path.exists():
        raise MissingPathError(
            f"Device path {devices_path} does not exist. "
            "Please run the set-config command first"
        )

    sketch_path = Path(arduino.sketch_path)
    logger.debug("sketch_path: %s, exists: %s", sketch_path, sketch_path.exists())
    if not arduino.sketch_path or not sketch_path.exists():
        raise MissingPathError(f"Sketch path {sketch_path} does not exist")

    image_dir = devices_path / device_id
    image_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Image will be stored in %s", image_dir)

    descriptor = load_descriptor(device_id, descriptor_path(devices_path, device_id))
    build_flags = assemble_build_flags(descriptor) + credential_flags

    cmd = compose_compile_command(arduino, build_flags, image_dir)
    return run_command(cmd, "Failed to compile image")


__all__ = [
    "INSTALL_URL",
    "check_toolchain_install",
    "compile_image",
    "compose_compile_command",
    "list_boards",
]
