"""Pydantic models for device descriptor validation.

A descriptor is a per-device YAML file authored out-of-band. Only the
keys below are interpreted; anything else is kept as extra data.
"""

from typing import Any

from pydantic import AliasPath, BaseModel, ConfigDict, Field


class CompileTimeSetting(BaseModel):
    """A single compile-time definition.

    Attributes:
        compile_time_prefix: Flag text emitted before the value (e.g. ``-DFOO=``).
        value: Value appended to the prefix.
    """

    model_config = ConfigDict(extra="allow")

    compile_time_prefix: str
    value: str


class DeviceIdentity(BaseModel):
    """The ``Device`` section of a descriptor."""

    model_config = ConfigDict(extra="allow")

    id: str


class NetworkSchema(BaseModel):
    """One entry of the ``Networks`` list."""

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    config: list[CompileTimeSetting]


class DeviceDescriptor(BaseModel):
    """Complete device descriptor.

    Attributes:
        device: Device identity (``Device``).
        compile_time_config_prefix: Literal text emitted before all flags.
        device_config: Device-specific definitions (``DeviceConfig``).
        networks: Raw network entries (``Networks``). Entries after the
            first may still be incomplete.
        primary_network: ``Networks[0]``, the only entry that feeds the
            build flags and the only one validated strictly.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    device: DeviceIdentity = Field(alias="Device")
    compile_time_config_prefix: str = Field(alias="CompileTimeConfigPrefix")
    device_config: list[CompileTimeSetting] = Field(alias="DeviceConfig")
    networks: list[dict[str, Any]] = Field(alias="Networks", min_length=1)
    # Missing only when Networks itself is missing or empty, which the
    # networks field already reports.
    primary_network: NetworkSchema | None = Field(
        default=None,
        validation_alias=AliasPath("Networks", 0),
        exclude=True,
    )

    @property
    def device_id(self) -> str:
        """Id declared in the ``Device`` section."""
        return self.device.id

    @property
    def network_config(self) -> list[CompileTimeSetting]:
        """Definitions of the first network entry."""
        return self.primary_network.config


__all__ = [
    "CompileTimeSetting",
    "DeviceDescriptor",
    "DeviceIdentity",
    "NetworkSchema",
]
