"""Homebrew and Rust toolchain updates."""

from __future__ import annotations

import logging

from stool.cli.ui import console, print_heading, print_success, print_warning
from stool.command import runner
from stool.errors import ErrorKind, StoolError

logger = logging.getLogger(__name__)


def update_brew() -> None:
    """Run ``brew update`` then ``brew upgrade``."""
    print_heading("Updating Homebrew")
    runner.execute_checked(["brew", "update"], ErrorKind.brew_update_failed)
    runner.execute_checked(["brew", "upgrade"], ErrorKind.brew_update_failed)
    print_success("Homebrew updated successfully")


def update_rustup() -> None:
    """Run ``rustup update`` for every installed toolchain."""
    print_heading("Updating Rust toolchain")
    runner.execute_checked(["rustup", "update"], ErrorKind.rustup_update_failed)
    print_success("Rust toolchain updated successfully")


def update_all() -> None:
    """Update Homebrew and rustup; one failing does not stop the other.

    Raises:
        StoolError: ``command_execution_failed`` naming every update that failed.
    """
    failures: list[tuple[str, StoolError]] = []

    for name, step in (("brew", update_brew), ("rustup", update_rustup)):
        try:
            step()
        except StoolError as exc:
            logger.debug("%s update failed", name, exc_info=True)
            print_warning(f"{name} update failed: {exc}")
            failures.append((name, exc))

    if failures:
        details = "; ".join(f"{name}: {exc}" for name, exc in failures)
        names = ", ".join(name for name, _ in failures)
        raise StoolError(
            ErrorKind.command_execution_failed, f"Failed updates: {names} ({details})"
        )

    console.print()
    print_success("All updates completed successfully")
