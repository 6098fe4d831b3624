"""Interactive scp upload and download."""

from __future__ import annotations

import os
from collections.abc import Sequence
from enum import Enum

from stool import interactive
from stool.command import dispatch
from stool.models import Target

DEFAULT_REMOTE_DIR = "~/"
DEFAULT_DOWNLOAD_DIR = "~/Downloads/"


class TransferMode(str, Enum):
    upload = "upload"
    download = "download"


_MODE_ITEMS = ["Upload (local -> remote)", "Download (remote -> local)", interactive.MENU_CANCEL]


def remote_path(target: Target, path: str) -> str:
    """``user@host:path`` as understood by scp."""
    return f"{target.destination}:{path}"


def select_mode() -> TransferMode | None:
    choice = interactive.select_from_list("Transfer direction:", _MODE_ITEMS)
    if choice == 0:
        return TransferMode.upload
    if choice == 1:
        return TransferMode.download
    return None


def build_paths(mode: TransferMode, target: Target) -> tuple[str, str]:
    """Ask for the two ends of the copy and return ``(source, destination)``."""
    if mode == TransferMode.upload:
        local = os.path.expanduser(interactive.input_text("Local file path"))
        remote = interactive.input_text("Remote path", default=DEFAULT_REMOTE_DIR)
        return local, remote_path(target, remote)

    remote = interactive.input_text("Remote file path")
    local = os.path.expanduser(interactive.input_text("Local path", default=DEFAULT_DOWNLOAD_DIR))
    return remote_path(target, remote), local


def transfer(servers: Sequence[Target]) -> None:
    """Upload or download one file to or from a selected server."""
    mode = select_mode()
    if mode is None:
        return

    target = interactive.select_target(servers)
    if target is None:
        return
    target = interactive.select_credential(target)

    source, destination = build_paths(mode, target)
    dispatch.transfer(source, destination, target.credential)
