"""Tyr - firmware lifecycle tooling for IoT device families.

This package provides bootstrapping, provisioning and manufacturing
(compile/flash) helpers around an external device toolchain such as
arduino-cli.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
