"""Error definitions for tyr.

Every error carries a stable ``code`` for programmatic handling. Library
code raises these; only the CLI converts them into a process exit code.
"""

from __future__ import annotations

# Error code constants
CONFIG_PARSE_ERROR = "config_parse_error"
CONFIG_IO_ERROR = "config_io_error"
DESCRIPTOR_NOT_FOUND = "descriptor_not_found"
DESCRIPTOR_PARSE_ERROR = "descriptor_parse_error"
DEVICE_ID_MISMATCH = "device_id_mismatch"
TOOLCHAIN_MISSING = "toolchain_missing"
SUBPROCESS_FAILURE = "subprocess_failure"
INVALID_CREDENTIAL_LENGTH = "invalid_credential_length"
MISSING_PATH = "missing_path"
UNSUPPORTED_FAMILY = "unsupported_family"


class TyrError(Exception):
    """Base exception for all tyr errors."""

    default_code = "tyr_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class ConfigParseError(TyrError):
    """Configuration file exists but is malformed."""

    default_code = CONFIG_PARSE_ERROR


class ConfigIoError(TyrError):
    """Configuration file or directory could not be read or written."""

    default_code = CONFIG_IO_ERROR


class DescriptorNotFoundError(TyrError):
    """Device descriptor file does not exist."""

    default_code = DESCRIPTOR_NOT_FOUND

    def __init__(self, path: str) -> None:
        super().__init__(f"Device descriptor {path} does not exist")
        self.path = path


class DescriptorParseError(TyrError):
    """Device descriptor is not valid YAML or does not match the schema.

    Attributes:
        path: Descriptor file path.
        field_errors: One ``(location, message)`` pair per failing field.
    """

    default_code = DESCRIPTOR_PARSE_ERROR

    def __init__(
        self,
        path: str,
        reason: str | None = None,
        field_errors: list[tuple[str, str]] | None = None,
    ) -> None:
        self.path = path
        self.field_errors = field_errors or []
        lines = [f"Invalid device descriptor {path}"]
        if reason:
            lines[0] += f": {reason}"
        for location, msg in self.field_errors:
            lines.append(f"  {location}: {msg}")
        super().__init__("\n".join(lines))


class DeviceIdMismatchError(TyrError):
    """Descriptor ``Device.id`` does not match the requested device id."""

    default_code = DEVICE_ID_MISMATCH

    def __init__(self, path: str, expected: str, actual: str) -> None:
        super().__init__(
            f"DeviceID in config file {path} ({actual!r}) "
            f"does not match device_id {expected!r}"
        )
        self.path = path
        self.expected = expected
        self.actual = actual


class ToolchainMissingError(TyrError):
    """External toolchain binary is not installed or not runnable."""

    default_code = TOOLCHAIN_MISSING


class SubprocessFailureError(TyrError):
    """External command failed to start or exited non-zero."""

    default_code = SUBPROCESS_FAILURE

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
        code: str | None = None,
    ) -> None:
        super().__init__(message, code)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class InvalidCredentialLengthError(TyrError):
    """A network credential field has the wrong length."""

    default_code = INVALID_CREDENTIAL_LENGTH

    def __init__(self, field: str, expected: int, actual: int) -> None:
        super().__init__(
            f"{field} must be {expected} characters long, got {actual}"
        )
        self.field = field
        self.expected = expected
        self.actual = actual


class MissingPathError(TyrError):
    """A configured filesystem path does not exist."""

    default_code = MISSING_PATH


class UnsupportedFamilyError(TyrError):
    """The operation is not implemented for the configured family."""

    default_code = UNSUPPORTED_FAMILY


__all__ = [
    "ConfigIoError",
    "ConfigParseError",
    "DescriptorNotFoundError",
    "DescriptorParseError",
    "DeviceIdMismatchError",
    "InvalidCredentialLengthError",
    "MissingPathError",
    "SubprocessFailureError",
    "ToolchainMissingError",
    "TyrError",
    "UnsupportedFamilyError",
]
