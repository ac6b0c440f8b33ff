from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from pathlib import Path

import pandas as pd

from ..config.loader import LedgerConfig
from ..logging.error_log import DiagnosticLogBuffer
from ..models.run_result import RunResult
from ..output.writer import write_rows
from ..parsing.classifier import LineKind, classify_line
from ..parsing.context import parse_month_marker, resolve_year
from ..parsing.fields import parse_line
from ..parsing.source import WORKBOOK_SUFFIXES, SourceDocument, read_source
from .aggregator import month_stats
from .datasets import SALES, Dataset, get_dataset
from .diagnostics import DiagnosticsCollector
from .progress import ScanProgress
from .scanner import SalesScanner, ScanOutcome, SectionScanner

"""Pipeline orchestration for one cleaning run.

read source -> resolve year -> scan (normalize rows) -> aggregate -> write
output -> flush diagnostics log -> RunResult.

Only reading the source and writing the output can fail the run
(SourceReadError, OutputWriteError); every row-level problem ends up in the
diagnostics of the returned RunResult.
"""

__all__ = [
    "INSPECT_LIMIT",
    "default_output_path",
    "scan_document",
    "run_pipeline",
    "inspect_source",
]

logger = logging.getLogger(__name__)

INSPECT_LIMIT = 20


def default_output_path(input_path: Path) -> Path:
    """``orders.csv`` -> ``orders_cleaned.csv``; workbooks become ``.csv``."""
    suffix = input_path.suffix
    if suffix.lower() in WORKBOOK_SUFFIXES:
        suffix = ".csv"
    return input_path.with_name(f"{input_path.stem}_cleaned{suffix}")


def _read(input_path: Path, config: LedgerConfig) -> SourceDocument:
    return read_source(
        input_path,
        encoding=config.encoding,
        delimiter=config.delimiter,
        quote_char=config.quote_char,
        sheet_name=config.sheet_name,
    )


def scan_document(
    dataset: Dataset,
    document: SourceDocument,
    config: LedgerConfig,
    diagnostics: DiagnosticsCollector,
) -> ScanOutcome:
    """Run the scanner matching the dataset's input shape over the document.

    Raises:
        SourceReadError: sales export without its column header on line 2
    """
    with ScanProgress(len(document.lines), description=dataset.name) as progress:
        if dataset.shape == SALES:
            sales = SalesScanner.for_lines(
                document.lines, diagnostics, config.delimiter, config.quote_char
            )
            return sales.scan(document.lines, document.content, on_line=progress.advance)

        resolution = resolve_year(document.identifier, document.content, config.fallback_year)
        if resolution.defaulted:
            diagnostics.run_warning(
                "YEAR_DEFAULTED", f"Could not detect year, defaulting to {resolution.year}"
            )
        logger.debug("Detected year: %d", resolution.year)
        scanner = SectionScanner(
            dataset.normalizer(),
            diagnostics,
            resolution.year,
            config.delimiter,
            config.quote_char,
        )
        return scanner.scan(document.lines, on_line=progress.advance)


def _flush_diagnostics_log(
    config: LedgerConfig, document: SourceDocument, dataset: Dataset, diagnostics: DiagnosticsCollector
) -> Path | None:
    if not config.diagnostics_log_dir:
        return None
    buffer = DiagnosticLogBuffer(Path(config.diagnostics_log_dir))
    buffer.extend(document.identifier, dataset.name, diagnostics)
    try:
        path = buffer.flush()
    except OSError as e:
        # the cleaned output is already written; the log is a side channel
        logger.warning("diagnostics log not written: %s", e)
        return None
    if path is not None:
        logger.debug("diagnostics log: %s", path)
    return path


def run_pipeline(
    mode: str,
    input_path: Path,
    output_path: Path | None = None,
    config: LedgerConfig | None = None,
) -> RunResult:
    """Clean one export file into one output file.

    Args:
        mode: dataset name (see ``datasets.DATASETS``)
        input_path: delimited text or workbook export
        output_path: destination; ``default_output_path(input_path)`` when None
        config: loaded configuration; defaults when None

    Raises:
        ValueError: unknown mode
        SourceReadError: source missing, unreadable or not in the expected shape
        OutputWriteError: destination cannot be written
    """
    config = config or LedgerConfig()
    dataset = get_dataset(mode)
    output_path = output_path or default_output_path(input_path)

    start_time = datetime.now(UTC)
    t0 = time.perf_counter()

    document = _read(input_path, config)
    logger.debug("Read %d lines from %s", len(document.lines), document.identifier)

    diagnostics = DiagnosticsCollector()
    outcome = scan_document(dataset, document, config, diagnostics)
    if not outcome.records:
        diagnostics.run_error("NO_RECORDS", "No valid records found in the source")

    rows = dataset.build_rows(outcome.records, diagnostics)
    written = write_rows(output_path, dataset.columns, rows)

    _flush_diagnostics_log(config, document, dataset, diagnostics)

    end_time = datetime.now(UTC)
    return RunResult(
        dataset=dataset.name,
        source_path=input_path,
        output_path=output_path,
        records_written=written,
        normalized_records=len(outcome.records),
        diagnostics=diagnostics.snapshot(),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=time.perf_counter() - t0,
        summary_rows_skipped=outcome.summary_rows_skipped,
        month_stats=tuple(month_stats(outcome.records)),
    )


def inspect_source(
    mode: str, input_path: Path, config: LedgerConfig | None = None, limit: int = INSPECT_LIMIT
) -> pd.DataFrame:
    """First ``limit`` lines with their classification, for eyeballing a new export.

    Columns: line, kind, month, fields. For the sales shape, ``month`` shows the
    context a "MONTH OF" marker on that line would set.

    Raises:
        ValueError: unknown mode
        SourceReadError: source missing or unreadable
    """
    config = config or LedgerConfig()
    dataset = get_dataset(mode)
    document = _read(input_path, config)
    markers = dataset.normalizer.schema_markers

    rows = []
    for line in document.lines[:limit]:
        c = classify_line(line.text, markers)
        month = c.month or ""
        if dataset.shape == SALES:
            marker = parse_month_marker(line.text)
            month = f"{marker.month} {marker.year}" if marker is not None else ""
        fields = parse_line(line, config.delimiter, config.quote_char).fields
        rows.append(
            {
                "line": line.line_number,
                "kind": c.kind.name,
                "month": month,
                "fields": " | ".join(fields) if c.kind is not LineKind.BLANK else "",
            }
        )
    return pd.DataFrame(rows, columns=["line", "kind", "month", "fields"])
