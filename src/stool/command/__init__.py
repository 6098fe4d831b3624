"""External command execution: process runner, expect automation and dispatch."""

from stool.command.dispatch import connect, transfer

__all__ = ["connect", "transfer"]
