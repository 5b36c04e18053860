"""Read source content, refusing binary and non-UTF-8 data."""

from __future__ import annotations

from pathlib import Path

# Same window git uses to decide that a blob is binary.
_BINARY_SNIFF_BYTES = 8000


class ReadError(Exception):
    """Raised when a file cannot be read as UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def looks_binary(data: bytes) -> bool:
    return b"\x00" in data[:_BINARY_SNIFF_BYTES]


def decode_source(data: bytes, path: str) -> str:
    """Decode *data* as UTF-8 (BOM tolerated). Raises ReadError."""
    if looks_binary(data):
        raise ReadError(path, "binary content")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ReadError(path, f"not valid UTF-8 (byte {exc.start})") from exc


def read_source(path: Path, display_path: str | None = None) -> str:
    """Read *path* from disk and decode it. Raises ReadError."""
    label = display_path or str(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ReadError(label, exc.strerror or str(exc)) from exc
    return decode_source(data, label)
