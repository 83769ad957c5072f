"""Device descriptor loading.

Descriptors live at ``<devices_path>/<device_id>/config.yaml``. Loading
validates the document against ``DeviceDescriptor`` and checks that its
``Device.id`` matches the requested device.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from tyr.devices.schema import DeviceDescriptor
from tyr.errors import (
    DescriptorNotFoundError,
    DescriptorParseError,
    DeviceIdMismatchError,
)

logger = logging.getLogger(__name__)

DESCRIPTOR_FILENAME = "config.yaml"


def descriptor_path(devices_path: Path | str, device_id: str) -> Path:
    """Return the descriptor path for a device."""
    return Path(devices_path) / device_id / DESCRIPTOR_FILENAME


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the document is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a YAML mapping, got {type(data).__name__}")
    return data


def _field_errors(error: ValidationError) -> list[tuple[str, str]]:
    return [
        (".".join(str(part) for part in err["loc"]) or "<root>", err["msg"])
        for err in error.errors()
    ]


def parse_descriptor_data(data: dict[str, Any], path: Path) -> DeviceDescriptor:
    """Validate descriptor data.

    Raises:
        DescriptorParseError: With one entry per missing or wrong-typed field.
    """
    try:
        return DeviceDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorParseError(str(path), field_errors=_field_errors(e)) from e


def load_descriptor(device_id: str, path: Path) -> DeviceDescriptor:
    """Load and validate the descriptor of a device.

    Args:
        device_id: Device id the descriptor must declare.
        path: Path to the descriptor YAML file.

    Returns:
        Validated DeviceDescriptor.

    Raises:
        DescriptorNotFoundError: If ``path`` does not exist.
        DescriptorParseError: If the YAML is malformed or fields are invalid.
        DeviceIdMismatchError: If ``Device.id`` differs from ``device_id``.
    """
    path = Path(path)
    if not path.exists():
        raise DescriptorNotFoundError(str(path))

    try:
        data = load_yaml(path)
    except yaml.YAMLError as e:
        raise DescriptorParseError(str(path), reason=f"malformed YAML ({e})") from e
    except ValueError as e:
        raise DescriptorParseError(str(path), reason=str(e)) from e
    except OSError as e:
        raise DescriptorParseError(str(path), reason=f"unreadable ({e})") from e

    descriptor = parse_descriptor_data(data, path)

    if descriptor.device_id != device_id:
        raise DeviceIdMismatchError(str(path), device_id, descriptor.device_id)

    logger.debug(
        "Loaded descriptor for %s: %d device settings, %d network settings",
        device_id,
        len(descriptor.device_config),
        len(descriptor.network_config),
    )
    return descriptor


def list_device_ids(devices_path: Path | str) -> list[str]:
    """List devices that have a descriptor under ``devices_path``.

    Returns:
        Sorted device ids; empty if ``devices_path`` does not exist.
    """
    root = Path(devices_path)
    if not devices_path or not root.is_dir():
        logger.warning("Devices path does not exist: %s", root)
        return []
    return sorted(
        entry.name
        for entry in root.iterdir()
        if entry.is_dir() and (entry / DESCRIPTOR_FILENAME).is_file()
    )


__all__ = [
    "DESCRIPTOR_FILENAME",
    "descriptor_path",
    "list_device_ids",
    "load_descriptor",
    "load_yaml",
    "parse_descriptor_data",
]
