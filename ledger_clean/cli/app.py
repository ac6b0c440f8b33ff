from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, load_config, resolve_config_path
from ..logging.init import enable_debug, get_logger, log_summary, setup_logging
from ..output.writer import OutputWriteError
from ..parsing.source import SourceReadError
from ..services.datasets import DATASETS
from ..services.pipeline import inspect_source, run_pipeline
from ..services.summary import render_report, render_summary_line

"""CLI entry points.

``ledger-clean [--debug] [--inspect-data] [--config PATH] MODE INPUT [OUTPUT]``

plus one program per mode with the same flags and ``INPUT [OUTPUT]``
(``clean-bulk-orders``, ``clean-sales`` ...).

Exit codes: 0 when the output was written (warnings and row errors included),
1 on usage errors, configuration errors, unreadable input or unwritable output.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits 2 on usage errors; this tool reports them as 1."""

    def error(self, message: str):  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(EXIT_FATAL, f"{self.prog}: error: {message}\n")


def _build_parser(mode: str | None) -> argparse.ArgumentParser:
    prog = "ledger-clean" if mode is None else f"clean-{mode}"
    p = _ArgumentParser(prog=prog, description="Clean hand-maintained ledger exports into tabular CSV")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data",
        action="store_true",
        help="Print the first classified lines of the input then exit",
    )
    p.add_argument("--config", metavar="PATH", help="YAML config file")
    if mode is None:
        p.add_argument("mode", choices=list(DATASETS), help="Dataset / output shape")
    p.add_argument("input_file", help="Export to clean (.csv/.txt or .xlsx)")
    p.add_argument("output_file", nargs="?", help="Destination (default: <input>_cleaned.<ext>)")
    return p


def _load_env_file(path: Path) -> None:
    """Load .env with python-dotenv; variables already set in the process win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _inspect_data(mode: str, input_path: Path, cfg) -> int:
    try:
        frame = inspect_source(mode, input_path, cfg)
    except SourceReadError as e:
        get_logger().error(f"read: {e}")
        return EXIT_FATAL
    print(f"FILE: {input_path.name} mode={mode}")
    print(frame.to_string(index=False))
    return EXIT_SUCCESS


def main(argv: list[str] | None = None, mode: str | None = None) -> int:
    logger = setup_logging()

    # [] from tests must not fall through to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    try:
        args = _build_parser(mode).parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)
    mode = mode or args.mode

    if args.debug:
        enable_debug()

    _load_env_file(Path(".env"))
    config_path = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    if config_path is not None:
        logger.debug(f"config: {config_path}")

    input_path = Path(args.input_file)
    if args.inspect_data:
        return _inspect_data(mode, input_path, cfg)

    output_path = Path(args.output_file) if args.output_file else None
    try:
        result = run_pipeline(mode, input_path, output_path, cfg)
    except SourceReadError as e:
        logger.error(f"read: {e}")
        return EXIT_FATAL
    except OutputWriteError as e:
        logger.error(f"write: {e}")
        return EXIT_FATAL

    for level, message in render_report(result, cfg.warning_preview_limit):
        logger.log(level, message)
    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result).removeprefix("SUMMARY "))
    return EXIT_SUCCESS


def clean_bulk_orders(argv: list[str] | None = None) -> int:
    return main(argv, mode="bulk-orders")


def clean_bulk_monthly(argv: list[str] | None = None) -> int:
    return main(argv, mode="bulk-monthly")


def clean_bulk_customer_monthly(argv: list[str] | None = None) -> int:
    return main(argv, mode="bulk-customer-monthly")


def clean_items(argv: list[str] | None = None) -> int:
    return main(argv, mode="items")


def clean_sales(argv: list[str] | None = None) -> int:
    return main(argv, mode="sales")
