"""Interactive SSH connection."""

from __future__ import annotations

from collections.abc import Sequence

from stool import interactive
from stool.command import dispatch
from stool.models import Target


def connect(servers: Sequence[Target]) -> None:
    """Pick a server, settle its credential and open a session to it."""
    target = interactive.select_target(servers)
    if target is None:
        return

    target = interactive.select_credential(target)
    dispatch.connect(target)
