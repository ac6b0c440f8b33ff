from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime
from pathlib import Path

from ..models.diagnostic import Diagnostic, DiagnosticLogEntry

"""Diagnostics log (JSON Lines).

When a diagnostics directory is configured, each run appends its diagnostics
to ``<dir>/diagnostics-YYYYMMDD-HHMMSS.log`` (UTC, stamped on first access).
Fixed schema, one object per line:
timestamp, file, dataset, line, severity, code, message.
"""

__all__ = [
    "TIMESTAMP_FMT",
    "DiagnosticLogBuffer",
]

TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DiagnosticLogBuffer:
    """In-memory buffer; flush() appends everything buffered so far."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self._entries: list[DiagnosticLogEntry] = []
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self.directory / f"diagnostics-{stamp}.log"
        return self._file_path

    def extend(self, file: str, dataset: str, diagnostics: Iterable[Diagnostic]) -> None:
        for d in diagnostics:
            self._entries.append(DiagnosticLogEntry.create(file, dataset, d))

    def __len__(self) -> int:  # pragma: no cover
        return len(self._entries)

    def flush(self) -> Path | None:
        """Write buffered entries; return the file path, or None when empty.

        Raises:
            OSError: directory cannot be created or file cannot be written
        """
        if not self._entries:
            return None
        self.directory.mkdir(parents=True, exist_ok=True)
        fp = self.file_path
        with fp.open("a", encoding="utf-8") as f:
            for e in self._entries:
                f.write(e.to_json_line() + "\n")
        self._entries.clear()
        return fp
