"""Result of a single external process invocation."""

from __future__ import annotations

from dataclasses import dataclass

from stool.errors import ErrorKind, StoolError


@dataclass(frozen=True)
class CommandOutcome:
    """Transient outcome of one spawned child process.

    ``source`` holds the OS error when the process could not be spawned at all;
    ``returncode`` is ``None`` in that case.
    """

    exited_zero: bool
    error_kind: ErrorKind
    returncode: int | None = None
    source: OSError | None = None

    @property
    def ok(self) -> bool:
        return self.exited_zero

    def raise_for_error(self, message: str | None = None) -> None:
        if self.exited_zero:
            return
        if self.source is not None:
            raise StoolError(self.error_kind, message) from self.source
        detail = message
        if self.returncode is not None:
            suffix = f"exit status {self.returncode}"
            detail = f"{message} ({suffix})" if message else suffix
        raise StoolError(self.error_kind, detail)
