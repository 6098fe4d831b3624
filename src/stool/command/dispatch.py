"""Authentication-aware dispatch of ``ssh`` and ``scp``.

Credential precedence is fixed: key path > password > none. Exactly one of the
three paths runs per call and the child's exit status decides the result.
"""

from __future__ import annotations

import logging

from stool.cli.ui import print_info, print_success
from stool.command import expect, runner
from stool.command.secrets import SecretBuffer
from stool.errors import ErrorKind
from stool.models import Credential, CredentialKind, Target

logger = logging.getLogger(__name__)

SSH_PROGRAM = "ssh"
SCP_PROGRAM = "scp"


def ssh_argv(target: Target) -> list[str]:
    """Argument vector for a key or default-auth ``ssh`` session."""
    credential = target.credential
    if credential.key_path:
        return [SSH_PROGRAM, "-i", credential.key_path, target.destination]
    return [SSH_PROGRAM, target.destination]


def scp_argv(source: str, destination: str, credential: Credential) -> list[str]:
    """Argument vector for a key or default-auth ``scp`` copy."""
    if credential.key_path:
        return [SCP_PROGRAM, "-i", credential.key_path, source, destination]
    return [SCP_PROGRAM, source, destination]


def connect(target: Target) -> None:
    """Open an interactive SSH session to ``target``; blocks until it ends."""
    credential = target.credential
    message = f"Failed to connect to {target.destination}"

    if credential.password is not None:
        print_info("Connecting with password authentication")
        with SecretBuffer(credential.password) as secret:
            script = expect.render_ssh_script(target.destination, secret)
        expect.run_expect_script(SecretBuffer(script), ErrorKind.ssh_connection_failed, message)
        return

    if credential.kind == CredentialKind.key:
        print_info("Connecting with key authentication")
    else:
        print_info("Connecting with default SSH authentication")

    logger.info("Opening SSH session to %s (%s)", target.destination, credential.kind.value)
    runner.execute_checked(ssh_argv(target), ErrorKind.ssh_connection_failed, message)


def transfer(source: str, destination: str, credential: Credential) -> None:
    """Copy ``source`` to ``destination`` with ``scp``.

    Both paths follow the ``[user@host:]path`` convention and are passed through
    untouched. A transfer either exits zero or is reported failed as a whole.
    """
    message = f"Failed to copy {source} to {destination}"

    if credential.password is not None:
        print_info("Transferring with password authentication")
        with SecretBuffer(credential.password) as secret:
            script = expect.render_scp_script(source, destination, secret)
        expect.run_expect_script(SecretBuffer(script), ErrorKind.file_transfer_failed, message)
    else:
        if credential.kind == CredentialKind.key:
            print_info("Transferring with key authentication")
        else:
            print_info("Transferring with default SSH authentication")
        runner.execute_checked(
            scp_argv(source, destination, credential), ErrorKind.file_transfer_failed, message
        )

    print_success("Transfer completed successfully")
