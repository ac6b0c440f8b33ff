from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from ..models.diagnostic import Diagnostic
from ..models.parse_result import Present
from ..models.records import FieldRow, MonthContext, NormalizedRecord, RawLine
from ..parsing.classifier import LineKind, classify_line, is_schema_header
from ..parsing.context import contains_month_marker, find_first_month_marker, parse_month_marker
from ..parsing.fields import parse_line
from ..parsing.source import SourceReadError
from .diagnostics import DiagnosticsCollector
from .normalizers import RowNormalizer, SalesNormalizer, Skip

"""Section scanners.

SectionScanner drives the month-sectioned exports (bulk orders, items):

    SEEKING_SECTION --month header--> SEEKING_SCHEMA --schema header--> IN_DATA

A month header is accepted in any state and always returns the machine to
SEEKING_SCHEMA with the new month. Data lines are only normalized in IN_DATA
with a month set; anything else (pre-section noise, rows between a month
header and its column header) is ignored without a diagnostic.

SalesScanner handles the daily sales export, whose month sections are
"MONTH OF <name> <year>" markers inside the DATE column.

Each scanner instance owns its state; one instance per run.
"""

__all__ = [
    "ScanState",
    "ScanOutcome",
    "SectionScanner",
    "SalesScanner",
]

logger = logging.getLogger(__name__)

LineCallback = Callable[[], None]


class ScanState(Enum):
    SEEKING_SECTION = "seeking_section"
    SEEKING_SCHEMA = "seeking_schema"
    IN_DATA = "in_data"


@dataclass
class ScanOutcome:
    records: list[NormalizedRecord] = field(default_factory=list)
    summary_rows_skipped: int = 0


class _RowHandler:
    """Shared row routing: normalize, then store the record or the diagnostic."""

    def __init__(
        self,
        normalizer: RowNormalizer,
        diagnostics: DiagnosticsCollector,
        delimiter: str = ",",
        quote_char: str = '"',
    ) -> None:
        self.normalizer = normalizer
        self.diagnostics = diagnostics
        self.delimiter = delimiter
        self.quote_char = quote_char
        self.context: MonthContext | None = None
        self.outcome = ScanOutcome()

    def _parse(self, line: RawLine) -> FieldRow:
        return parse_line(line, self.delimiter, self.quote_char)

    def _set_context(self, context: MonthContext | None) -> None:
        self.context = context
        self.normalizer.on_context_change(context)
        if context is not None:
            logger.debug("Processing %s %s", context.month, context.year)

    def _handle_row(self, row: FieldRow, context: MonthContext) -> None:
        try:
            result = self.normalizer.normalize(row, context)
        except Exception as e:  # recorded, the run goes on
            self.diagnostics.error(row.line_number, "UNEXPECTED_ERROR", f"{type(e).__name__}: {e}")
            return
        if isinstance(result, Diagnostic):
            self.diagnostics.add(result)
        elif isinstance(result, Skip):
            if result.summary_row:
                self.outcome.summary_rows_skipped += 1
                logger.debug("Skipping summary row at %d: %s", row.line_number, result.reason)
        else:
            self.outcome.records.append(result)


class SectionScanner(_RowHandler):
    """State machine for exports with standalone month-header lines."""

    def __init__(
        self,
        normalizer: RowNormalizer,
        diagnostics: DiagnosticsCollector,
        year: int,
        delimiter: str = ",",
        quote_char: str = '"',
    ) -> None:
        super().__init__(normalizer, diagnostics, delimiter, quote_char)
        self.year = year
        self.state = ScanState.SEEKING_SECTION

    def feed(self, line: RawLine) -> None:
        c = classify_line(line.text, self.normalizer.schema_markers)
        if c.kind is LineKind.BLANK:
            return
        if c.kind is LineKind.SECTION_HEADER:
            if c.month is not None:
                self._set_context(MonthContext(month=c.month, year=self.year))
                self.state = ScanState.SEEKING_SCHEMA
            return
        if c.kind is LineKind.SCHEMA_HEADER:
            if self.state is ScanState.SEEKING_SCHEMA:
                self.state = ScanState.IN_DATA
            return
        if self.state is ScanState.IN_DATA and self.context is not None:
            self._handle_row(self._parse(line), self.context)

    def scan(self, lines: Sequence[RawLine], on_line: LineCallback | None = None) -> ScanOutcome:
        for line in lines:
            self.feed(line)
            if on_line is not None:
                on_line()
        return self.outcome


class SalesScanner(_RowHandler):
    """Scanner for the daily sales export.

    Line 1 is a title and is ignored; line 2 is the column header (must name
    DATE and TOTAL AMOUNT). The month context is seeded from the first marker
    anywhere in the content and re-seeded by each marker in the DATE column;
    every re-seed clears the inherited day.
    """

    def __init__(
        self,
        header_fields: Sequence[str],
        diagnostics: DiagnosticsCollector,
        delimiter: str = ",",
        quote_char: str = '"',
    ) -> None:
        super().__init__(SalesNormalizer.from_header(header_fields), diagnostics, delimiter, quote_char)
        self.normalizer: SalesNormalizer

    @classmethod
    def for_lines(
        cls,
        lines: Sequence[RawLine],
        diagnostics: DiagnosticsCollector,
        delimiter: str = ",",
        quote_char: str = '"',
    ) -> SalesScanner:
        """Build a scanner from the header on line 2.

        Raises:
            SourceReadError: fewer than two lines, or no DATE / TOTAL AMOUNT header
        """
        if len(lines) < 2:
            raise SourceReadError("sales export needs a title line and a column header line")
        header_line = lines[1]
        if not is_schema_header(header_line.text, SalesNormalizer.schema_markers):
            raise SourceReadError(
                f"line {header_line.line_number}: expected a header with DATE and TOTAL AMOUNT"
            )
        header = parse_line(header_line, delimiter, quote_char)
        return cls(header.fields, diagnostics, delimiter, quote_char)

    def seed(self, content: str) -> None:
        context = find_first_month_marker(content)
        if context is None:
            self.diagnostics.run_warning(
                "NO_MONTH_CONTEXT",
                "Could not detect month/year from content; rows before the first marker are ignored",
            )
        self._set_context(context)
        if not self.normalizer.filters_summary_rows:
            self.diagnostics.run_warning(
                "NO_ENTITY_COLUMN", "No COMPANY column; summary rows cannot be told apart"
            )

    def feed(self, line: RawLine) -> None:
        if not line.text.strip():
            return
        row = self._parse(line)
        date_cell = self.normalizer.schema.get(row, "date")
        cell_text = date_cell.text if isinstance(date_cell, Present) else ""
        if contains_month_marker(cell_text):
            context = parse_month_marker(cell_text)
            if context is None:
                self.diagnostics.warn(
                    row.line_number,
                    "BAD_MONTH_MARKER",
                    f"Could not parse month header: {cell_text}",
                )
                return
            self._set_context(context)
            return
        if self.context is None:
            return
        self._handle_row(row, self.context)

    def scan(
        self, lines: Sequence[RawLine], content: str, on_line: LineCallback | None = None
    ) -> ScanOutcome:
        self.seed(content)
        for line in lines[2:]:
            self.feed(line)
            if on_line is not None:
                on_line()
        return self.outcome
