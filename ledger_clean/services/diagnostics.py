from __future__ import annotations

from collections.abc import Iterator

from ..models.diagnostic import RUN_LEVEL_LINE, Diagnostic, Severity

"""Diagnostics collector.

Append-only and unbounded; collecting never aborts the run. Console output is
bounded separately by the summary renderer's preview limit.
"""

__all__ = [
    "DiagnosticsCollector",
]


class DiagnosticsCollector:
    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._items.append(diagnostic)

    def warn(self, line_number: int, code: str, message: str) -> Diagnostic:
        d = Diagnostic(line_number, Severity.WARNING, code, message)
        self._items.append(d)
        return d

    def error(self, line_number: int, code: str, message: str) -> Diagnostic:
        d = Diagnostic(line_number, Severity.ERROR, code, message)
        self._items.append(d)
        return d

    def run_warning(self, code: str, message: str) -> Diagnostic:
        return self.warn(RUN_LEVEL_LINE, code, message)

    def run_error(self, code: str, message: str) -> Diagnostic:
        return self.error(RUN_LEVEL_LINE, code, message)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity is Severity.ERROR]

    def snapshot(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)
