"""Helpers for append-only JSONL files."""

from pathlib import Path


def drop_partial_tail(path: Path) -> int:
    """
    Truncate a trailing line left without its newline by an interrupted append.

    Returns the number of bytes dropped (0 when the file is missing, empty or
    ends cleanly).
    """
    if not path.exists():
        return 0
    data = path.read_bytes()
    if not data or data.endswith(b"\n"):
        return 0
    keep = data.rfind(b"\n") + 1
    with open(path, "r+b") as fh:
        fh.truncate(keep)
    return len(data) - keep
