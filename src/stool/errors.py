"""Error taxonomy for stool operations.

Every failure surfaced to the user is a :class:`StoolError` tagged with an
:class:`ErrorKind`. The underlying OS error, when there is one, is chained via
``raise ... from exc`` and is available as ``__cause__``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    # SSH
    ssh_connection_failed = "ssh_connection_failed"
    ssh_authentication_failed = "ssh_authentication_failed"
    server_not_found = "server_not_found"
    expect_command_failed = "expect_command_failed"

    # File search
    file_not_found = "file_not_found"
    search_pattern_invalid = "search_pattern_invalid"

    # File transfer
    file_transfer_failed = "file_transfer_failed"

    # Config
    config_load_failed = "config_load_failed"
    config_parse_error = "config_parse_error"

    # Updates
    brew_update_failed = "brew_update_failed"
    rustup_update_failed = "rustup_update_failed"

    # Docker
    docker_command_failed = "docker_command_failed"
    docker_not_installed = "docker_not_installed"

    # AWS
    aws_command_failed = "aws_command_failed"
    aws_cli_not_installed = "aws_cli_not_installed"

    # General
    command_execution_failed = "command_execution_failed"
    invalid_input = "invalid_input"
    permission_denied = "permission_denied"
    io_error = "io_error"
    cancelled = "cancelled"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[ErrorKind, str] = {
    ErrorKind.ssh_connection_failed: "SSH connection failed",
    ErrorKind.ssh_authentication_failed: "SSH authentication failed",
    ErrorKind.server_not_found: "Server not found",
    ErrorKind.expect_command_failed: "expect command failed",
    ErrorKind.file_not_found: "File not found",
    ErrorKind.search_pattern_invalid: "Invalid search pattern",
    ErrorKind.file_transfer_failed: "File transfer failed",
    ErrorKind.config_load_failed: "Config load failed",
    ErrorKind.config_parse_error: "Config parse error",
    ErrorKind.brew_update_failed: "brew update failed",
    ErrorKind.rustup_update_failed: "rustup update failed",
    ErrorKind.docker_command_failed: "Docker command failed",
    ErrorKind.docker_not_installed: "Docker not installed",
    ErrorKind.aws_command_failed: "AWS command failed",
    ErrorKind.aws_cli_not_installed: "AWS CLI not installed",
    ErrorKind.command_execution_failed: "Command execution failed",
    ErrorKind.invalid_input: "Invalid input",
    ErrorKind.permission_denied: "Permission denied",
    ErrorKind.io_error: "I/O error",
    ErrorKind.cancelled: "Operation cancelled",
}


class StoolError(Exception):
    """A classified failure of a stool operation."""

    def __init__(self, kind: ErrorKind, message: str | None = None) -> None:
        self.kind = kind
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.message:
            return f"{self.kind.label}: {self.message}"
        return self.kind.label
