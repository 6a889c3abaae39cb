"""Run a credential command and capture what it prints.

The runner is passed around as a plain callable (:data:`CommandRunner`) so
callers, and tests, can supply their own.
"""

from __future__ import annotations

import subprocess
from typing import Callable

from specrun.exceptions import AuthError
from specrun.output import debug

CommandRunner = Callable[[str], str]
"""Takes a shell command, returns its trimmed stdout, raises :class:`AuthError`."""


def run_command(command: str) -> str:
    """Run *command* with ``sh -c`` and return its stripped standard output.

    The command inherits the environment and has no timeout.

    Raises:
        AuthError: ``run command: <stderr>`` when the command exits non-zero
            or cannot be started.
    """
    debug(f"Running credential command: {command}")
    try:
        result = subprocess.run(
            ["sh", "-c", command],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise AuthError(f"run command: {exc}") from exc

    if result.returncode != 0:
        raise AuthError(f"run command: {result.stderr.strip()}")
    return result.stdout.strip()
