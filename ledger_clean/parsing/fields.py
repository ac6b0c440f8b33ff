from __future__ import annotations

from ..models.records import FieldRow, RawLine

"""Forgiving delimited-field parser.

Splits one line into trimmed fields. A quote toggles quoted mode wherever it
appears, so a quoted field may contain the delimiter literally; a doubled quote
inside quoted mode is one literal quote. An unterminated quote simply runs to
the end of the line. Nothing here raises: hand-maintained spreadsheet exports
are too inconsistent for a strict reader.
"""

__all__ = [
    "split_fields",
    "parse_line",
]


def split_fields(text: str, delimiter: str = ",", quote_char: str = '"') -> list[str]:
    """Split ``text`` into trimmed field values.

    >>> split_fields('ACME,"1,000",M1')
    ['ACME', '1,000', 'M1']
    """
    values: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(text)
    while i < n:
        char = text[i]
        if char == quote_char:
            if in_quotes and i + 1 < n and text[i + 1] == quote_char:
                current.append(quote_char)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == delimiter and not in_quotes:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    values.append("".join(current).strip())
    return values


def parse_line(line: RawLine, delimiter: str = ",", quote_char: str = '"') -> FieldRow:
    return FieldRow(
        fields=tuple(split_fields(line.text.strip(), delimiter, quote_char)),
        line_number=line.line_number,
    )
