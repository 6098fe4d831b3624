"""Scoped handling of secret material.

Python ``str`` objects are immutable and cannot be scrubbed, so secrets are
copied into a ``bytearray`` for the single write that needs them and
overwritten as soon as the owning ``with`` block exits.
"""

from __future__ import annotations

from types import TracebackType

from pydantic import SecretStr


def _to_bytes(value: str | bytes | bytearray | SecretStr) -> bytearray:
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    if isinstance(value, str):
        return bytearray(value.encode("utf-8"))
    return bytearray(value)


class SecretBuffer:
    """Mutable secret that is zeroed on every exit path of its ``with`` block."""

    __slots__ = ("_buffer",)

    def __init__(self, value: str | bytes | bytearray | SecretStr) -> None:
        self._buffer = _to_bytes(value)
        # A caller handing over a bytearray gives up its copy.
        if isinstance(value, bytearray):
            wipe(value)

    def __enter__(self) -> bytearray:
        return self._buffer

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.wipe()

    def __repr__(self) -> str:
        return "SecretBuffer('**********')"

    @property
    def wiped(self) -> bool:
        return not any(self._buffer)

    def wipe(self) -> None:
        wipe(self._buffer)


def wipe(buffer: bytearray) -> None:
    """Overwrite ``buffer`` in place with zero bytes."""
    for index in range(len(buffer)):
        buffer[index] = 0
