"""Shared type definitions for tyr.

This module contains enums and dataclasses shared across subpackages
to avoid circular imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Family(str, Enum):
    """Device family selecting the authoritative per-family config."""

    ARDUINO = "Arduino"


@dataclass
class ProcessResult:
    """Result of an external command execution.

    Attributes:
        command: The argv that was executed.
        exit_code: Process exit code.
        stdout: Captured standard output.
        stderr: Captured standard error.
        data: Parsed JSON output, when requested.
    """

    command: list[str]
    exit_code: int
    stdout: str
    stderr: str
    data: Any = None

    @property
    def success(self) -> bool:
        """Whether the command exited with status zero."""
        return self.exit_code == 0


@dataclass
class ImageInfo:
    """Information about a built firmware image."""

    device_id: str
    filename: str
    path: str
    size_bytes: int
    sha256: str
    kind: str = "other"
    labels: list[str] = field(default_factory=list)


__all__ = [
    "Family",
    "ImageInfo",
    "ProcessResult",
]
