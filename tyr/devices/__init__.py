"""Device descriptor module.

This module handles:
- Descriptor schema validation
- Loading descriptors from ``<devices_path>/<device_id>/config.yaml``
- Assembling compiler build flags from descriptor settings
"""

from tyr.devices.flags import assemble_build_flags, compose_settings
from tyr.devices.io import (
    DESCRIPTOR_FILENAME,
    descriptor_path,
    list_device_ids,
    load_descriptor,
)
from tyr.devices.schema import (
    CompileTimeSetting,
    DeviceDescriptor,
    DeviceIdentity,
    NetworkSchema,
)

__all__ = [
    # Schema
    "CompileTimeSetting",
    "DeviceDescriptor",
    "DeviceIdentity",
    "NetworkSchema",
    # IO functions
    "DESCRIPTOR_FILENAME",
    "descriptor_path",
    "list_device_ids",
    "load_descriptor",
    # Flags
    "assemble_build_flags",
    "compose_settings",
]
