"""File search and directory counting.

Patterns come in three flavours:

- glob: contains ``*`` or ``?`` (``"*.rs"``), matched against the whole name
- exact: has a dot but does not start with one (``"report.pdf"``)
- partial: anything else, matched as ``*pattern*`` (``"draft"``)
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum

from stool.cli.ui import print_info, print_paths
from stool.errors import ErrorKind, StoolError

logger = logging.getLogger(__name__)


class PatternKind(str, Enum):
    exact = "exact"
    glob = "glob"
    partial = "partial"


@dataclass(frozen=True)
class SearchPattern:
    kind: PatternKind
    pattern: str

    def matcher(self) -> re.Pattern[str] | None:
        """Compiled regex for glob/partial patterns, ``None`` for exact names."""
        if self.kind == PatternKind.exact:
            return None
        try:
            return re.compile(glob_to_regex(self.pattern))
        except re.error as exc:
            raise StoolError(
                ErrorKind.search_pattern_invalid, f"Invalid pattern: {self.pattern}"
            ) from exc


def classify_pattern(pattern: str) -> SearchPattern:
    if "*" in pattern or "?" in pattern:
        return SearchPattern(PatternKind.glob, pattern)
    if "." in pattern and not pattern.startswith("."):
        return SearchPattern(PatternKind.exact, pattern)
    return SearchPattern(PatternKind.partial, f"*{pattern}*")


def glob_to_regex(glob: str) -> str:
    """Translate ``*`` and ``?`` into an anchored regex; everything else is literal."""
    parts = []
    for char in glob:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "^" + "".join(parts) + "$"


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _walk(
    directory: str,
    pattern: SearchPattern,
    matcher: re.Pattern[str] | None,
    results: list[str],
) -> None:
    with os.scandir(directory) as scan:
        entries = sorted(scan, key=lambda entry: entry.name)

    for entry in entries:
        is_dir = entry.is_dir(follow_symlinks=False)
        if is_dir and _is_hidden(entry.name):
            continue

        if matcher is None:
            matched = entry.name == pattern.pattern
        else:
            matched = matcher.fullmatch(entry.name) is not None
        if matched:
            results.append(os.path.join(directory, entry.name))

        if is_dir:
            try:
                _walk(os.path.join(directory, entry.name), pattern, matcher, results)
            except PermissionError as exc:
                logger.warning("Skipping unreadable directory %s: %s", exc.filename, exc.strerror)


def find_files(pattern: str, root: str = ".") -> list[str]:
    """Depth-first search below ``root`` for names matching ``pattern``.

    Directories whose name starts with ``.`` are never entered and directory
    symlinks are not followed. Matching files and directories are returned as
    paths joined onto ``root``, in traversal order.
    """
    if not os.path.exists(root):
        raise StoolError(ErrorKind.file_not_found, f"Path not found: {root}")

    search = classify_pattern(pattern)
    matcher = search.matcher()
    results: list[str] = []
    try:
        _walk(root, search, matcher, results)
    except NotADirectoryError:
        return []
    except OSError as exc:
        raise StoolError(ErrorKind.io_error, f"Failed to read directory: {root}") from exc
    return results


def find(pattern: str, path: str | None = None) -> list[str]:
    search_path = path or "."
    print_info(f"Searching for '{pattern}' in {search_path}...")

    results = find_files(pattern, search_path)
    if not results:
        print_info(f"No files found matching '{pattern}'")
    else:
        print_paths(f"Found {len(results)} file(s):", results)
    return results


def count(path: str | None = None) -> int:
    """Count the immediate children of a directory (not recursive)."""
    target_path = path or "."

    if not os.path.exists(target_path):
        raise StoolError(ErrorKind.file_not_found, f"Path not found: {target_path}")
    if not os.path.isdir(target_path):
        raise StoolError(ErrorKind.invalid_input, f"Not a directory: {target_path}")

    try:
        with os.scandir(target_path) as scan:
            total = sum(1 for _ in scan)
    except OSError as exc:
        raise StoolError(
            ErrorKind.io_error, f"Failed to read directory: {target_path}"
        ) from exc

    print_info(f"{total} items in {target_path}")
    return total
