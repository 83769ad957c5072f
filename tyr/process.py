"""Process runner for external toolchain commands.

Commands are executed as an argv list without a shell, so arguments
(including assembled build flags) reach the toolchain as literal data.
Failures are raised as ``SubprocessFailureError``; turning them into a
process exit code is left to the CLI.
"""

from __future__ import annotations

import json
import logging
import shlex
import subprocess

from tyr.errors import SubprocessFailureError
from tyr.types import ProcessResult

logger = logging.getLogger(__name__)


def run_command(command: list[str], failure_message: str) -> ProcessResult:
    """Run a command and capture its output.

    Args:
        command: Command as list of strings.
        failure_message: Human-readable message reported on failure.

    Returns:
        ProcessResult with captured stdout/stderr.

    Raises:
        SubprocessFailureError: If the command cannot be started or exits
            non-zero.
    """
    cmd_str = shlex.join(command)
    logger.info("Running command: %s", cmd_str)

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        logger.error("%s: %s", failure_message, e)
        raise SubprocessFailureError(
            f"{failure_message}: {e}",
            exit_code=None,
            code="execution_error",
        ) from e

    if result.returncode != 0:
        logger.error("Command failed: %s", failure_message)
        logger.error("Command output: %s", result.stdout)
        logger.error("Command error: %s", result.stderr)
        raise SubprocessFailureError(
            failure_message,
            exit_code=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    logger.debug("Command output: %s", result.stdout)
    if result.stderr:
        logger.debug("Command error: %s", result.stderr)

    return ProcessResult(
        command=list(command),
        exit_code=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
    )


def run_json_command(command: list[str], failure_message: str) -> ProcessResult:
    """Run a command whose stdout is a JSON document.

    Returns:
        ProcessResult with ``data`` set to the parsed JSON.

    Raises:
        SubprocessFailureError: If the command fails or its output is not
            valid JSON.
    """
    result = run_command(command, failure_message)
    try:
        result.data = json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise SubprocessFailureError(
            f"{failure_message}: could not parse JSON output ({e})",
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
            code="invalid_json",
        ) from e
    return result


__all__ = ["run_command", "run_json_command"]
