"""Configuration for tyr.

Two layers live here:

- ``Settings``: process-level knobs parsed by pydantic-settings from
  environment variables with the ``TYR_`` prefix (log level, config dir).
- The configuration store: a single TOML file (``<home>/.tyr/config.toml``)
  holding the active device family and per-family build settings. It is
  created from defaults on first read and rewritten in full on every set.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Literal

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tyr.errors import ConfigIoError, ConfigParseError
from tyr.types import Family

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.toml"
DEFAULT_CLI_PATH = "arduino-cli"
DEFAULT_BOARD_TYPE = "adafruit:samd:adafruit_feather_m0"


def _default_config_dir() -> Path:
    """Return the default per-user config directory."""
    return Path.home() / ".tyr"


def _default_sketch_path() -> str:
    return str(Path.home() / "Arduino" / "tyr" / "sketch")


def _default_devices_path() -> str:
    return str(Path.home() / "Arduino" / "tyr" / "devices")


class Settings(BaseSettings):
    """Process settings.

    Settings are loaded from environment variables with the TYR_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="TYR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    config_dir: Path = Field(
        default_factory=_default_config_dir,
        description="Directory holding config.toml",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lowercase level names such as 'info'."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


def get_settings() -> Settings:
    """Get the process settings loaded from the environment."""
    return Settings()


class ArduinoConfig(BaseModel):
    """Arduino family build settings.

    Attributes:
        cli_path: Name or path of the arduino-cli binary.
        sketch_path: Sketch directory compiled for every device.
        board_type: Fully qualified board name passed to ``-b``.
        devices_path: Root of per-device descriptors and build outputs.
    """

    model_config = ConfigDict(extra="ignore")

    cli_path: str = DEFAULT_CLI_PATH
    sketch_path: str = ""
    board_type: str = ""
    devices_path: str = ""


class TyrConfig(BaseModel):
    """Persistent tyr configuration."""

    model_config = ConfigDict(extra="ignore")

    family: Family = Family.ARDUINO
    arduino: ArduinoConfig = Field(default_factory=ArduinoConfig)


def default_config() -> TyrConfig:
    """Build the configuration written on first run."""
    return TyrConfig(
        family=Family.ARDUINO,
        arduino=ArduinoConfig(
            cli_path=DEFAULT_CLI_PATH,
            board_type=DEFAULT_BOARD_TYPE,
            sketch_path=_default_sketch_path(),
            devices_path=_default_devices_path(),
        ),
    )


def get_default_config_path(settings: Settings | None = None) -> Path:
    """Return the config file path, creating its directory if absent.

    Args:
        settings: Optional settings; loaded from the environment if omitted.

    Returns:
        Path to ``config.toml``.

    Raises:
        ConfigIoError: If the config directory cannot be created.
    """
    if settings is None:
        settings = get_settings()
    config_dir = settings.config_dir
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigIoError(
            f"Failed to create config directory {config_dir}: {e}"
        ) from e
    return config_dir / CONFIG_FILENAME


def config_to_toml(config: TyrConfig) -> str:
    """Render a configuration as TOML text."""
    return toml.dumps(config.model_dump(mode="json"))


def config_to_json(config: TyrConfig) -> str:
    """Render a configuration as indented JSON."""
    return config.model_dump_json(indent=2)


def save_config(config: TyrConfig, path: Path | None = None) -> None:
    """Serialize the full configuration and overwrite the config file.

    Args:
        config: Configuration to write.
        path: Target file; defaults to the per-user config path.

    Raises:
        ConfigIoError: If the directory cannot be created or the write fails.
    """
    if path is None:
        path = get_default_config_path()
    logger.debug("Writing config to: %s", path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(config_to_toml(config), encoding="utf-8")
    except OSError as e:
        raise ConfigIoError(f"Failed to write config file {path}: {e}") from e


def load_config(path: Path | None = None) -> TyrConfig:
    """Load the configuration, creating it from defaults on first use.

    Args:
        path: Config file; defaults to the per-user config path.

    Returns:
        Parsed configuration.

    Raises:
        ConfigParseError: If the file exists but is malformed.
        ConfigIoError: If the file cannot be read or created.
    """
    if path is None:
        path = get_default_config_path()
    logger.debug("Config path: %s", path)

    if not path.exists():
        logger.info("Config file %s does not exist, creating it", path)
        config = default_config()
        save_config(config, path)
        return config

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigParseError(f"Malformed config file {path}: {e}") from e
    except OSError as e:
        raise ConfigIoError(f"Failed to read config file {path}: {e}") from e

    try:
        data = toml.loads(text)
    except toml.TomlDecodeError as e:
        raise ConfigParseError(f"Malformed config file {path}: {e}") from e

    try:
        return TyrConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigParseError(f"Invalid config file {path}: {e}") from e


def set_config(
    family: Family,
    board_type: str | None = None,
    sketch_path: str | None = None,
    devices_path: str | None = None,
    path: Path | None = None,
) -> TyrConfig:
    """Apply partial overrides to the stored configuration.

    ``family`` is always applied; each optional field is applied only when
    it is not None, so omitted fields keep their stored value.

    Returns:
        The configuration as written.
    """
    if path is None:
        path = get_default_config_path()
    config = load_config(path)

    config.family = family
    if board_type is not None:
        logger.info("Setting arduino board type to %s", board_type)
        config.arduino.board_type = board_type
    if sketch_path is not None:
        logger.info("Setting arduino sketch path to %s", sketch_path)
        config.arduino.sketch_path = sketch_path
    if devices_path is not None:
        logger.info("Setting arduino devices path to %s", devices_path)
        config.arduino.devices_path = devices_path

    save_config(config, path)
    return config


def get_board_type(path: Path | None = None) -> str:
    """Reload the config and return the Arduino board type."""
    return load_config(path).arduino.board_type


def get_sketch_path(path: Path | None = None) -> str:
    """Reload the config and return the Arduino sketch path."""
    return load_config(path).arduino.sketch_path


def get_devices_path(path: Path | None = None) -> str:
    """Reload the config and return the Arduino devices path."""
    return load_config(path).arduino.devices_path


__all__ = [
    "ArduinoConfig",
    "Settings",
    "TyrConfig",
    "config_to_json",
    "config_to_toml",
    "default_config",
    "get_board_type",
    "get_default_config_path",
    "get_devices_path",
    "get_settings",
    "get_sketch_path",
    "load_config",
    "save_config",
    "set_config",
]
