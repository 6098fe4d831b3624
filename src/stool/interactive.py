"""Interactive menus and prompts.

Every feature picks its inputs through these helpers so the "registry entries +
manual input + cancel" menu is built in exactly one place. A ``None`` return
from the selection helpers means the user chose *Cancel*; callers treat it as a
silent no-op.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from typing import TypeVar

from rich.prompt import IntPrompt, Prompt

from stool.cli.ui import console, print_heading, print_info, print_menu, print_warning
from stool.errors import ErrorKind, StoolError
from stool.models import Credential, Target

T = TypeVar("T")

MENU_MANUAL_INPUT = "Manual input"
MENU_CANCEL = "Cancel"

AUTH_DEFAULT = "Default authentication (ssh-agent, ~/.ssh/config)"
AUTH_KEY = "Key file"
AUTH_PASSWORD = "Password"


def _no_input() -> StoolError:
    return StoolError(ErrorKind.invalid_input, "No interactive input available")


def select_from_list(prompt: str, items: Sequence[str]) -> int:
    """Show a numbered menu and return the 0-based index of the chosen item."""
    if not items:
        raise StoolError(ErrorKind.invalid_input, f"Nothing to choose from for '{prompt}'")

    print_heading(prompt)
    print_menu(items)
    choices = [str(number) for number in range(1, len(items) + 1)]
    try:
        choice = IntPrompt.ask(
            "Choice", console=console, choices=choices, show_choices=False, default=1
        )
    except EOFError as exc:
        raise _no_input() from exc
    return choice - 1


def input_text(prompt: str, *, default: str | None = None, allow_empty: bool = False) -> str:
    """Ask for a line of text and return it trimmed.

    Empty answers are asked again unless ``allow_empty`` is set; with a
    ``default`` an empty answer yields the default.
    """
    while True:
        try:
            if default is None:
                value = Prompt.ask(prompt, console=console, default="", show_default=False)
            else:
                value = Prompt.ask(prompt, console=console, default=default)
        except EOFError as exc:
            raise _no_input() from exc

        value = value.strip()
        if value or allow_empty:
            return value
        print_warning("A value is required.")


def input_secret(prompt: str) -> str:
    """Ask for masked input; an empty answer is returned as ``""``."""
    try:
        return Prompt.ask(prompt, console=console, password=True, default="", show_default=False)
    except EOFError as exc:
        raise _no_input() from exc


def select_entry(
    prompt: str,
    entries: Sequence[T],
    label: Callable[[T], str],
    manual: Callable[[], T],
) -> T | None:
    """Pick one of ``entries``, enter one manually, or cancel (``None``)."""
    items = [label(entry) for entry in entries]
    items.append(MENU_MANUAL_INPUT)
    items.append(MENU_CANCEL)

    selection = select_from_list(prompt, items)
    if selection == len(items) - 1:
        return None
    if selection == len(items) - 2:
        return manual()
    return entries[selection]


def _manual_target() -> Target:
    user = input_text("Enter username")
    host = input_text("Enter host or IP address")
    target = Target(name=f"{user}@{host}", host=host, user=user)
    print_info(f"Target: {target.destination}")
    return target


def select_target(targets: Sequence[Target], prompt: str = "Select server:") -> Target | None:
    """Choose a configured target or type one in; manual targets carry no credential."""
    target = select_entry(prompt, targets, Target.label, _manual_target)
    if target is not None and target in targets:
        print_info(f"Selected server: {target.name} ({target.host})")
    return target


def select_credential(target: Target) -> Target:
    """Settle how to authenticate when ``target`` has no configured credential.

    Three outcomes: default authentication (agent or ssh config), a key file, or
    a password. An empty password falls back to default authentication.
    """
    if not target.credential.is_none:
        return target

    choice = select_from_list("Authentication method:", [AUTH_DEFAULT, AUTH_KEY, AUTH_PASSWORD])
    if choice == 1:
        key_path = input_text("Key file path")
        return target.with_credential(Credential.key(os.path.expanduser(key_path)))
    if choice == 2:
        password = input_secret("Password (leave empty for default authentication)")
        if password:
            return target.with_credential(Credential.with_password(password))
    return target
