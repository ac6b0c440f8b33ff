from __future__ import annotations

import csv
import io
import zipfile
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..models.records import RawLine

"""Source reader.

Text exports are read whole and split on line feeds (a trailing CR is dropped
from each line). Workbook exports are read with pandas, every cell as text, and
each sheet row is re-serialized as one delimited line so the scanner sees the
same shape either way.
"""

__all__ = [
    "SourceReadError",
    "SourceDocument",
    "WORKBOOK_SUFFIXES",
    "read_source",
    "split_lines",
]

WORKBOOK_SUFFIXES = frozenset({".xlsx", ".xlsm"})


class SourceReadError(Exception):
    """Raised when the source file is missing, unreadable or undecodable."""


@dataclass(frozen=True)
class SourceDocument:
    path: Path
    content: str
    lines: tuple[RawLine, ...]

    @property
    def identifier(self) -> str:
        return self.path.name


def split_lines(content: str) -> tuple[RawLine, ...]:
    return tuple(
        RawLine(text=text.rstrip("\r"), line_number=i)
        for i, text in enumerate(content.split("\n"), start=1)
    )


def _workbook_to_text(
    path: Path, sheet_name: str | int | None, delimiter: str, quote_char: str
) -> str:
    # dtype=str + keep_default_na=False keeps "NA"/"N/A" cells as literal text
    df = pd.read_excel(
        path,
        sheet_name=sheet_name if sheet_name is not None else 0,
        header=None,
        dtype=str,
        keep_default_na=False,
    )
    buf = io.StringIO()
    writer = csv.writer(
        buf, delimiter=delimiter, quotechar=quote_char, quoting=csv.QUOTE_MINIMAL, lineterminator="\n"
    )
    for raw in df.itertuples(index=False, name=None):
        writer.writerow([" ".join(str(v).splitlines()) for v in raw])
    return buf.getvalue()


def read_source(
    path: Path,
    *,
    encoding: str = "utf-8",
    delimiter: str = ",",
    quote_char: str = '"',
    sheet_name: str | int | None = None,
) -> SourceDocument:
    """Read the whole source into memory.

    Raises:
        SourceReadError: missing file, directory, I/O failure, bad encoding or
            an unreadable workbook
    """
    if not path.exists():
        raise SourceReadError(f"file not found: {path}")
    if not path.is_file():
        raise SourceReadError(f"not a file: {path}")
    try:
        if path.suffix.lower() in WORKBOOK_SUFFIXES:
            content = _workbook_to_text(path, sheet_name, delimiter, quote_char)
        else:
            # Excel "CSV UTF-8" exports start with a BOM
            content = path.read_text(encoding=encoding).removeprefix("\ufeff")
    except UnicodeDecodeError as e:
        raise SourceReadError(f"cannot decode {path.name} as {encoding}: {e}") from e
    except LookupError as e:
        raise SourceReadError(f"unknown encoding {encoding!r}: {e}") from e
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        # pandas raises ValueError for unknown sheets / corrupt workbooks
        raise SourceReadError(f"cannot read {path.name}: {e}") from e
    return SourceDocument(path=path, content=content, lines=split_lines(content))
