"""Build-flag assembly from device descriptors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tyr.devices.schema import CompileTimeSetting, DeviceDescriptor

logger = logging.getLogger(__name__)


def compose_settings(settings: list[CompileTimeSetting]) -> str:
    """Render each setting as ``prefix + value + " "`` in list order."""
    return "".join(f"{s.compile_time_prefix}{s.value} " for s in settings)


def assemble_build_flags(descriptor: DeviceDescriptor) -> str:
    """Assemble the compiler build property for a device.

    The result is ``CompileTimeConfigPrefix`` followed by the device
    settings and then the first network's settings. Order matters: the
    compiler keeps the last duplicate define. Values are not escaped.

    Args:
        descriptor: Validated device descriptor.

    Returns:
        Flags string passed verbatim as one ``--build-property`` argument.
    """
    flags = (
        descriptor.compile_time_config_prefix
        + compose_settings(descriptor.device_config)
        + compose_settings(descriptor.network_config)
    )
    logger.debug("Assembled build flags: %r", flags)
    return flags


__all__ = ["assemble_build_flags", "compose_settings"]
