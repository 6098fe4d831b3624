"""Spawning of external programs.

Every external tool is invoked as an argument vector, never through a shell.
Interactive commands inherit the terminal; probes and queries capture output.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence

from stool.command.secrets import SecretBuffer
from stool.errors import ErrorKind, StoolError
from stool.models import CommandOutcome

logger = logging.getLogger(__name__)


def execute(argv: Sequence[str], kind: ErrorKind) -> CommandOutcome:
    """Run ``argv`` attached to the current terminal and wait for it to exit."""
    logger.debug("Executing: %s", " ".join(argv))
    try:
        completed = subprocess.run(list(argv), check=False)
    except OSError as exc:
        logger.debug("Failed to spawn %s: %s", argv[0], exc)
        return CommandOutcome(exited_zero=False, error_kind=kind, source=exc)

    logger.debug("%s exited with status %s", argv[0], completed.returncode)
    return CommandOutcome(
        exited_zero=completed.returncode == 0,
        error_kind=kind,
        returncode=completed.returncode,
    )


def execute_checked(argv: Sequence[str], kind: ErrorKind, message: str | None = None) -> None:
    """Run ``argv`` and raise :class:`StoolError` unless it exits with status zero."""
    outcome = execute(argv, kind)
    outcome.raise_for_error(message or f"{' '.join(argv)} failed")


def capture(argv: Sequence[str], kind: ErrorKind) -> subprocess.CompletedProcess[str]:
    """Run ``argv`` with captured text output.

    Only a spawn failure raises; callers interpret the exit status themselves.
    """
    logger.debug("Capturing: %s", " ".join(argv))
    try:
        return subprocess.run(list(argv), capture_output=True, text=True, check=False)
    except OSError as exc:
        raise StoolError(kind, f"Failed to execute {argv[0]}") from exc


def execute_with_input(
    argv: Sequence[str],
    secret: SecretBuffer,
    kind: ErrorKind,
    message: str | None = None,
) -> None:
    """Run ``argv`` feeding ``secret`` on its stdin.

    The secret is wiped whether the spawn, the write or the child fails.
    """
    logger.debug("Executing with stdin input: %s", " ".join(argv))
    with secret as data:
        try:
            process = subprocess.Popen(list(argv), stdin=subprocess.PIPE)
        except OSError as exc:
            raise StoolError(kind, message or f"Failed to execute {argv[0]}") from exc

        try:
            if process.stdin is not None:
                process.stdin.write(data)
                process.stdin.close()
        except OSError as exc:
            process.kill()
            process.wait()
            raise StoolError(kind, message or f"Failed to write to {argv[0]}") from exc

    returncode = process.wait()
    CommandOutcome(
        exited_zero=returncode == 0, error_kind=kind, returncode=returncode
    ).raise_for_error(message or f"{' '.join(argv)} failed")


def require_program(name: str, kind: ErrorKind, hint: str | None = None) -> str:
    """Return the resolved path of ``name`` or raise if it is not installed."""
    path = shutil.which(name)
    if path is None:
        message = f"{name} is not installed."
        if hint:
            message = f"{message} {hint}"
        raise StoolError(kind, message)
    return path
