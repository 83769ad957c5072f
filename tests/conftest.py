"""Shared fixtures for tyr tests."""

from pathlib import Path

import pytest
import yaml


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch) -> Path:
    """Point the config store at a per-test directory."""
    config_dir = tmp_path / "tyr-home"
    monkeypatch.setenv("TYR_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("TYR_LOG_LEVEL", raising=False)
    return config_dir


@pytest.fixture
def descriptor_data() -> dict:
    """Return a valid descriptor for device 'dev1'."""
    return {
        "Device": {"id": "dev1", "model": "feather-m0"},
        "CompileTimeConfigPrefix": "compiler.cpp.extra_flags=",
        "DeviceConfig": [
            {"compile_time_prefix": "-DDEVICE_ID=", "value": "dev1"},
            {"compile_time_prefix": "-DSAMPLE_PERIOD=", "value": "60"},
        ],
        "Networks": [
            {
                "name": "chirpstack",
                "config": [
                    {"compile_time_prefix": "-DLORA_REGION=", "value": "US915"},
                ],
            },
            {
                "name": "backup",
                "config": [
                    {"compile_time_prefix": "-DLORA_REGION=", "value": "EU868"},
                ],
            },
        ],
    }


@pytest.fixture
def write_descriptor():
    """Return a helper writing a descriptor YAML file."""

    def _write(devices_path: Path, device_id: str, data: dict) -> Path:
        device_dir = devices_path / device_id
        device_dir.mkdir(parents=True, exist_ok=True)
        path = device_dir / "config.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        return path

    return _write
