from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

"""Output writer.

One header line with the fixed column names (bare), then one line per row. String
fields are quoted; numbers (int, Decimal) are written bare in their plain
string form. Lines end with ``\\n`` on every platform so repeated runs are
byte-identical.
"""

__all__ = [
    "OutputWriteError",
    "write_rows",
]


class OutputWriteError(Exception):
    """Destination could not be created or written."""


def write_rows(path: Path, columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> int:
    """Write ``rows`` under a ``columns`` header; return the number of data rows.

    Raises:
        OutputWriteError: the file cannot be opened or written
    """
    count = 0
    try:
        with path.open("w", newline="", encoding="utf-8") as f:
            csv.writer(f, lineterminator="\n").writerow(columns)
            writer = csv.writer(f, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
            for row in rows:
                if len(row) != len(columns):
                    raise ValueError(f"row has {len(row)} values for {len(columns)} columns")
                writer.writerow(row)
                count += 1
    except (OSError, ValueError, csv.Error) as e:
        raise OutputWriteError(f"cannot write {path}: {e}") from e
    return count
