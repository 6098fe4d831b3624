"""Password automation through ``expect``.

The automation script carries the password, so it is never placed on a command
line. It is written to a private pipe whose read end is handed to ``expect`` as
``/dev/fd/N``; the terminal's own stdin stays attached to the child so the
session can be handed back to the user after authentication.
"""

from __future__ import annotations

import logging
import os
import subprocess

from stool.command.secrets import SecretBuffer
from stool.errors import ErrorKind, StoolError
from stool.models import CommandOutcome

logger = logging.getLogger(__name__)

EXPECT_PROGRAM = "expect"

# Seconds to wait for a host-key or password prompt before carrying on.
PROMPT_TIMEOUT = 30

# Braces are escaped as well since answers sit inside a braced expect block.
_TCL_SPECIALS = frozenset(b'\\"$[]{}')

_ANSWER_PROMPTS = b"""expect {
    -nocase "yes/no" {
        send -- "yes\\r"
        exp_continue
    }
    -nocase "password:" {
        send -- %(secret)s
    }
    eof {
        catch wait result
        exit [lindex $result 3]
    }
    timeout {}
}
"""

_EXIT_WITH_CHILD_STATUS = b"""catch wait result
exit [lindex $result 3]
"""


def tcl_quote(value: bytes | bytearray) -> bytearray:
    """Quote ``value`` as a single double-quoted Tcl word."""
    quoted = bytearray(b'"')
    for byte in value:
        if byte in _TCL_SPECIALS:
            quoted.append(ord("\\"))
        quoted.append(byte)
    quoted.extend(b'"')
    return quoted


def _spawn_line(argv: list[str]) -> bytearray:
    line = bytearray(b"spawn -noecho")
    for arg in argv:
        line.extend(b" ")
        line.extend(tcl_quote(arg.encode("utf-8")))
    line.extend(b"\n")
    return line


def _append_prompt_answers(script: bytearray, secret: bytearray) -> None:
    quoted = tcl_quote(secret)
    # Carriage return goes inside the closing quote: "...\r"
    quoted[-1:] = b'\\r"'
    head, tail = _ANSWER_PROMPTS.split(b"%(secret)s")
    script.extend(head)
    script.extend(quoted)
    script.extend(tail)
    quoted[:] = bytes(len(quoted))


def _header() -> bytearray:
    return bytearray(b"log_user 1\nset timeout %d\n" % PROMPT_TIMEOUT)


def render_ssh_script(destination: str, secret: bytearray) -> bytearray:
    """Script that logs in with ``secret`` then hands the session to the user."""
    script = _header()
    script.extend(_spawn_line(["ssh", destination]))
    _append_prompt_answers(script, secret)
    script.extend(b"interact\n")
    script.extend(_EXIT_WITH_CHILD_STATUS)
    return script


def render_scp_script(source: str, destination: str, secret: bytearray) -> bytearray:
    """Script that authenticates an ``scp`` copy and waits for it to finish."""
    script = _header()
    script.extend(_spawn_line(["scp", source, destination]))
    _append_prompt_answers(script, secret)
    script.extend(b"set timeout -1\nexpect eof\n")
    script.extend(_EXIT_WITH_CHILD_STATUS)
    return script


def _write_all(fd: int, data: bytearray) -> None:
    view = memoryview(data)
    try:
        while view:
            written = os.write(fd, view)
            view = view[written:]
    finally:
        view.release()


def run_expect_script(script: SecretBuffer, kind: ErrorKind, message: str) -> None:
    """Run an automation ``script`` and map its exit status onto ``kind``.

    Failure to start ``expect`` or to deliver the script is reported as
    ``expect_command_failed``; a non-zero exit of the automated client as ``kind``.
    """
    with script as data:
        try:
            read_fd, write_fd = os.pipe()
        except OSError as exc:
            raise StoolError(
                ErrorKind.expect_command_failed, f"Failed to create script pipe: {message}"
            ) from exc

        argv = [EXPECT_PROGRAM, "-f", f"/dev/fd/{read_fd}"]
        logger.debug("Executing: %s", " ".join(argv))
        try:
            try:
                process = subprocess.Popen(argv, pass_fds=(read_fd,))
            except OSError as exc:
                raise StoolError(
                    ErrorKind.expect_command_failed, f"Failed to execute expect: {message}"
                ) from exc
            finally:
                os.close(read_fd)

            try:
                _write_all(write_fd, data)
            except OSError as exc:
                process.kill()
                process.wait()
                raise StoolError(
                    ErrorKind.expect_command_failed,
                    f"Failed to deliver automation script: {message}",
                ) from exc
        finally:
            os.close(write_fd)

    returncode = process.wait()
    logger.debug("expect exited with status %s", returncode)
    CommandOutcome(
        exited_zero=returncode == 0, error_kind=kind, returncode=returncode
    ).raise_for_error(message)
