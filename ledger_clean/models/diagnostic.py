from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum

"""Diagnostic model for row-level and run-level problems.

A Diagnostic is append-only: once recorded by the collector it is never
mutated. Row-level diagnostics carry the 1-based source line number; run-level
diagnostics (year defaulted, no records produced, ...) use line 0.
"""

__all__ = [
    "Severity",
    "Diagnostic",
    "DiagnosticLogEntry",
    "RUN_LEVEL_LINE",
]

RUN_LEVEL_LINE = 0


class Severity(Enum):
    """Diagnostic severity.

    - WARNING: expected-but-incomplete input, row dropped, run continues
    - ERROR: content that could not be interpreted despite recovery
    """
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Diagnostic:
    """One structured problem report keyed by source line number.

    Attributes:
        line_number: 1-based source line. 0 for run-level diagnostics
        severity: warning or error
        code: Classification in UPPER_SNAKE_CASE (e.g. INVALID_AMOUNT)
        message: Human-readable description
    """
    line_number: int
    severity: Severity
    code: str  # UPPER_SNAKE
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def render(self) -> str:
        if self.line_number == RUN_LEVEL_LINE:
            return f"{self.code}: {self.message}"
        return f"Line {self.line_number}: {self.message}"


@dataclass(frozen=True)
class DiagnosticLogEntry:
    """Fixed-schema JSON Lines entry written to the diagnostics log."""
    timestamp: str  # ISO8601 UTC
    file: str
    dataset: str
    line: int
    severity: str
    code: str
    message: str

    @staticmethod
    def create(file: str, dataset: str, diagnostic: Diagnostic) -> DiagnosticLogEntry:
        """Wrap a Diagnostic with the current UTC timestamp and source context."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return DiagnosticLogEntry(
            timestamp=ts,
            file=file,
            dataset=dataset,
            line=diagnostic.line_number,
            severity=diagnostic.severity.value,
            code=diagnostic.code,
            message=diagnostic.message,
        )

    def to_json_line(self) -> str:
        # asdict keeps the key set fixed to the dataclass fields
        return json.dumps(asdict(self), ensure_ascii=False)
