"""Tests for arduino/toolchain.py module.

Tests compile command composition and execution.
Uses mocked subprocess; no arduino-cli is required.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from tyr.arduino.credentials import LoRaWANCredentials
from tyr.arduino.toolchain import (
    check_toolchain_install,
    compile_image,
    compose_compile_command,
    list_boards,
)
from tyr.config import ArduinoConfig
from tyr.errors import (
    DescriptorNotFoundError,
    DeviceIdMismatchError,
    InvalidCredentialLengthError,
    MissingPathError,
    SubprocessFailureError,
    ToolchainMissingError,
)

EXPECTED_FLAGS = (
    "compiler.cpp.extra_flags="
    "-DDEVICE_ID=dev1 -DSAMPLE_PERIOD=60 -DLORA_REGION=US915 "
)


@pytest.fixture
def devices(tmp_path) -> Path:
    path = tmp_path / "devs"
    path.mkdir()
    return path


@pytest.fixture
def arduino(tmp_path, devices) -> ArduinoConfig:
    """Create Arduino settings with existing sketch and devices dirs."""
    sketch = tmp_path / "sketch"
    sketch.mkdir()
    return ArduinoConfig(
        cli_path="arduino-cli",
        board_type="uno",
        sketch_path=str(sketch),
        devices_path=str(devices),
    )


def completed(cmd, returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)


class TestComposeCompileCommand:
    """Tests for compose_compile_command function."""

    def test_command_layout(self, arduino, devices):
        """Should compose the full compile argv."""
        out = devices / "dev1"

        cmd = compose_compile_command(arduino, "P -DA=1 ", out)

        assert cmd == [
            "arduino-cli",
            "compile",
            "-e",
            "-b",
            "uno",
            "--build-property",
            "P -DA=1 ",
            "--output-dir",
            str(out),
            arduino.sketch_path,
        ]

    def test_uses_cli_path(self, arduino, tmp_path):
        """The configured binary should be invoked."""
        arduino.cli_path = "/opt/arduino/arduino-cli"

        cmd = compose_compile_command(arduino, "", tmp_path)

        assert cmd[0] == "/opt/arduino/arduino-cli"


class TestCompileImage:
    """Tests for compile_image function."""

    def test_compiles_with_assembled_flags(
        self, arduino, devices, descriptor_data, write_descriptor
    ):
        """Should run the compiler with the descriptor's flags."""
        write_descriptor(devices, "dev1", descriptor_data)

        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed([], stdout="Sketch uses 1234 bytes")

            result = compile_image(arduino, "dev1")

        assert mock_run.call_count == 1
        cmd = mock_run.call_args[0][0]
        assert cmd[cmd.index("--build-property") + 1] == EXPECTED_FLAGS
        assert cmd[cmd.index("--output-dir") + 1] == str(devices / "dev1")
        assert cmd[-1] == arduino.sketch_path
        assert result.stdout == "Sketch uses 1234 bytes"

    def test_appends_credentials(
        self, arduino, devices, descriptor_data, write_descriptor
    ):
        """Credential defines should follow the descriptor flags."""
        write_descriptor(devices, "dev1", descriptor_data)
        credentials = LoRaWANCredentials("A" * 16, "B" * 16, "C" * 32)

        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed([])
            compile_image(arduino, "dev1", credentials)

        cmd = mock_run.call_args[0][0]
        flags = cmd[cmd.index("--build-property") + 1]
        assert flags.startswith(EXPECTED_FLAGS)
        assert flags.endswith(f"-DLORAWAN_APPKEY={'C' * 32} ")

    def test_invalid_credentials_before_subprocess(
        self, arduino, devices, descriptor_data, write_descriptor
    ):
        """A 31 character appkey should fail without running anything."""
        write_descriptor(devices, "dev1", descriptor_data)
        credentials = LoRaWANCredentials("A" * 16, "B" * 16, "C" * 31)

        with patch("tyr.process.subprocess.run") as mock_run:
            with pytest.raises(InvalidCredentialLengthError):
                compile_image(arduino, "dev1", credentials)

        mock_run.assert_not_called()

    def test_missing_devices_path(self, arduino, tmp_path):
        """A missing devices path should raise MissingPathError."""
        arduino.devices_path = str(tmp_path / "nowhere")

        with pytest.raises(MissingPathError) as exc_info:
            compile_image(arduino, "dev1")
        assert "set-config" in exc_info.value.message

    def test_empty_devices_path(self, arduino):
        """An unset devices path should not fall back to the cwd."""
        arduino.devices_path = ""

        with pytest.raises(MissingPathError):
            compile_image(arduino, "dev1")

    def test_missing_sketch_path(self, arduino, tmp_path):
        """A missing sketch should raise MissingPathError."""
        arduino.sketch_path = str(tmp_path / "no-sketch")

        with pytest.raises(MissingPathError):
            compile_image(arduino, "dev1")

    def test_missing_descriptor(self, arduino, devices):
        """Output dir is created even if the descriptor is missing."""
        with patch("tyr.process.subprocess.run") as mock_run:
            with pytest.raises(DescriptorNotFoundError):
                compile_image(arduino, "dev1")

        mock_run.assert_not_called()
        assert (devices / "dev1").is_dir()

    def test_descriptor_for_other_device(
        self, arduino, devices, descriptor_data, write_descriptor
    ):
        """A descriptor declaring another id should be rejected."""
        descriptor_data["Device"]["id"] = "other"
        write_descriptor(devices, "dev1", descriptor_data)

        with pytest.raises(DeviceIdMismatchError):
            compile_image(arduino, "dev1")

    def test_compiler_failure(
        self, arduino, devices, descriptor_data, write_descriptor
    ):
        """Compiler errors should surface as SubprocessFailureError."""
        write_descriptor(devices, "dev1", descriptor_data)

        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed(
                [], returncode=1, stderr="error: 'foo' was not declared"
            )
            with pytest.raises(SubprocessFailureError) as exc_info:
                compile_image(arduino, "dev1")

        assert exc_info.value.message == "Failed to compile image"
        assert "not declared" in exc_info.value.stderr
        assert (devices / "dev1").is_dir()


class TestCheckToolchainInstall:
    """Tests for check_toolchain_install function."""

    def test_installed(self, arduino):
        """Should return parsed version info."""
        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed(
                [], stdout='{"Application": "arduino-cli", "VersionString": "1.1.1"}'
            )

            info = check_toolchain_install(arduino)

        assert info["VersionString"] == "1.1.1"
        assert mock_run.call_args[0][0] == [
            "arduino-cli",
            "version",
            "--format",
            "json",
        ]

    def test_binary_missing(self, arduino):
        """A missing binary should raise ToolchainMissingError."""
        arduino.cli_path = "definitely-not-arduino-cli-tyr"

        with pytest.raises(ToolchainMissingError) as exc_info:
            check_toolchain_install(arduino)

        assert "install" in exc_info.value.message
        assert exc_info.value.code == "toolchain_missing"

    def test_version_fails(self, arduino):
        """A failing version command should raise ToolchainMissingError."""
        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed([], returncode=127)

            with pytest.raises(ToolchainMissingError):
                check_toolchain_install(arduino)


class TestListBoards:
    """Tests for list_boards function."""

    def test_runs_board_list(self, arduino):
        """Should run board list verbatim."""
        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed([], stdout="/dev/ttyACM0 Serial Port")

            result = list_boards(arduino)

        assert mock_run.call_args[0][0] == ["arduino-cli", "board", "list"]
        assert "ttyACM0" in result.stdout

    def test_failure_message(self, arduino):
        """Failures should carry the connect-a-device hint."""
        with patch("tyr.process.subprocess.run") as mock_run:
            mock_run.return_value = completed([], returncode=1)

            with pytest.raises(SubprocessFailureError) as exc_info:
                list_boards(arduino)

        assert "connect a device" in exc_info.value.message
