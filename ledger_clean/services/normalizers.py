from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ..models.diagnostic import Diagnostic, Severity
from ..models.parse_result import FieldValue, Invalid, Missing, Parsed, ParseResult, Present
from ..models.records import (
    BulkOrderRecord,
    FieldRow,
    ItemRecord,
    MonthContext,
    NormalizedRecord,
    SalesDayRecord,
)
from .day_inheritance import DayInheritanceResolver

"""Row normalization and validation per dataset.

Shared primitives (name cleaning, amount parsing, explicit row schemas) plus one
normalizer per export shape. A normalizer turns one FieldRow into exactly one
outcome: a record, a Diagnostic (row dropped), or a Skip (row dropped silently,
e.g. an all-empty row or a sales subtotal row).
"""

__all__ = [
    "CENTS",
    "Skip",
    "Outcome",
    "clean_name",
    "parse_amount",
    "RowSchema",
    "RowNormalizer",
    "BulkOrderNormalizer",
    "ItemNormalizer",
    "SalesNormalizer",
]

CENTS = Decimal("0.01")

_CURRENCY_RE = re.compile(r"[$€£¥₹,\"'\s]")
_PARENS_RE = re.compile(r"^\((.*)\)$")
_DECIMAL_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class Skip:
    """Row intentionally dropped without a diagnostic."""
    reason: str
    summary_row: bool = False


Outcome = NormalizedRecord | Diagnostic | Skip


def clean_name(text: str, upper: bool = True) -> str:
    """Trim, collapse inner whitespace runs, optionally upper-case."""
    cleaned = _WS_RE.sub(" ", text.strip())
    return cleaned.upper() if upper else cleaned


def parse_amount(text: str) -> ParseResult[Decimal]:
    """Parse a ledger amount cell.

    Currency symbols, thousands separators, quotes and spaces are removed; a
    parenthesized number is negative; a lone dash is the accounting zero.

    >>> parse_amount('"1,000"')
    Parsed(value=Decimal('1000'))
    >>> parse_amount("(123.45)")
    Parsed(value=Decimal('-123.45'))
    """
    residual = _CURRENCY_RE.sub("", text)
    negative = False
    parens = _PARENS_RE.match(residual)
    if parens:
        residual = parens.group(1)
        negative = True
    if residual == "-":
        return Parsed(Decimal("0"))
    if not _DECIMAL_RE.match(residual):
        return Invalid(f'Invalid amount "{text}"')
    value = Decimal(residual)
    return Parsed(-value if negative else value)


@dataclass(frozen=True)
class RowSchema:
    """Fixed mapping of column roles to field positions.

    Positional exports (bulk orders, items) use consecutive positions; the sales
    export resolves positions from the names in its header line.
    """
    positions: Mapping[str, int]

    @classmethod
    def positional(cls, roles: Sequence[str]) -> RowSchema:
        return cls(positions={role: i for i, role in enumerate(roles)})

    @classmethod
    def from_header(
        cls, header_fields: Sequence[str], columns: Mapping[str, str]
    ) -> RowSchema:
        """Resolve ``role -> column name`` against a header row.

        An exact (case-insensitive) name wins over a header that merely contains
        the name; roles whose column is absent are left out.
        """
        upper = [h.strip().upper() for h in header_fields]
        positions = {}
        for role, name in columns.items():
            wanted = name.upper()
            if wanted in upper:
                positions[role] = upper.index(wanted)
                continue
            for i, header in enumerate(upper):
                if wanted in header:
                    positions[role] = i
                    break
        return cls(positions=positions)

    @property
    def width(self) -> int:
        return max(self.positions.values(), default=-1) + 1

    def has(self, role: str) -> bool:
        return role in self.positions

    def get(self, row: FieldRow, role: str) -> FieldValue:
        pos = self.positions.get(role)
        if pos is None or pos >= len(row.fields):
            return Missing(role)
        text = row.fields[pos].strip()
        return Present(text) if text else Missing(role)


def _warning(row: FieldRow, code: str, message: str) -> Diagnostic:
    return Diagnostic(row.line_number, Severity.WARNING, code, message)


class RowNormalizer(ABC):
    """Dataset-specific rule set applied to data rows of a month section."""

    #: column-name substrings that identify the schema header line
    schema_markers: tuple[str, ...] = ()

    def __init__(self, schema: RowSchema) -> None:
        self.schema = schema

    def on_context_change(self, context: MonthContext | None) -> None:
        """Hook for per-month state; called by the scanner on every new section."""

    def check_width(self, row: FieldRow) -> Diagnostic | None:
        if len(row) < self.schema.width:
            return _warning(
                row,
                "COLUMN_COUNT",
                f"Insufficient columns ({len(row)}), expected {self.schema.width}",
            )
        return None

    @abstractmethod
    def normalize(self, row: FieldRow, context: MonthContext) -> Outcome:
        ...


class BulkOrderNormalizer(RowNormalizer):
    """customer name, order amount (> 0), model number (optional)."""

    schema_markers = ("CUSTOMER NAME", "ORDER AMOUNT", "MODEL NO")
    ROLES = ("customer_name", "order_amount", "model_no")

    def __init__(self) -> None:
        super().__init__(RowSchema.positional(self.ROLES))

    def normalize(self, row: FieldRow, context: MonthContext) -> Outcome:
        if row.is_empty:
            return Skip("empty row")
        width_problem = self.check_width(row)
        if width_problem is not None:
            return width_problem

        amount_cell = self.schema.get(row, "order_amount")
        if isinstance(amount_cell, Missing):
            return _warning(row, "MISSING_FIELD", "Missing order amount")
        amount = parse_amount(amount_cell.text)
        if isinstance(amount, Invalid):
            return _warning(row, "INVALID_AMOUNT", amount.reason)
        if amount.value <= 0:
            return _warning(
                row,
                "NON_POSITIVE_AMOUNT",
                f'Invalid amount "{amount_cell.text}" -> {amount.value}',
            )

        customer = self.schema.get(row, "customer_name")
        if isinstance(customer, Missing):
            return _warning(row, "MISSING_FIELD", "Empty customer name")

        model = self.schema.get(row, "model_no")
        return BulkOrderRecord(
            customer_name=clean_name(customer.text),
            order_amount=amount.value,
            model_no=clean_name(model.text) if isinstance(model, Present) else "",
            context=context,
            source_line=row.line_number,
        )


class ItemNormalizer(RowNormalizer):
    """model number (upper-cased), category name (case kept)."""

    schema_markers = ("MODEL NO", "CATEGORY")
    ROLES = ("model_no", "category_name")

    def __init__(self) -> None:
        super().__init__(RowSchema.positional(self.ROLES))

    def normalize(self, row: FieldRow, context: MonthContext) -> Outcome:
        if row.is_empty:
            return Skip("empty row")
        width_problem = self.check_width(row)
        if width_problem is not None:
            return width_problem

        model = self.schema.get(row, "model_no")
        if isinstance(model, Missing):
            return _warning(row, "MISSING_FIELD", "Empty model number")
        category = self.schema.get(row, "category_name")
        if isinstance(category, Missing):
            return _warning(row, "MISSING_FIELD", "Empty category name")

        return ItemRecord(
            model_no=clean_name(model.text),
            category_name=clean_name(category.text, upper=False),
            context=context,
            source_line=row.line_number,
        )


class SalesNormalizer(RowNormalizer):
    """Daily sales rows: DATE (day number), TOTAL AMOUNT, COMPANY.

    Rows without a company are month subtotals already present in the sheet
    and are skipped so they are not counted twice.
    """

    schema_markers = ("DATE", "TOTAL AMOUNT")
    COLUMNS = {"date": "DATE", "total_amount": "TOTAL AMOUNT", "company": "COMPANY"}

    def __init__(self, schema: RowSchema) -> None:
        super().__init__(schema)
        self.days = DayInheritanceResolver()

    @classmethod
    def from_header(cls, header_fields: Sequence[str]) -> SalesNormalizer:
        return cls(schema=RowSchema.from_header(header_fields, cls.COLUMNS))

    @property
    def filters_summary_rows(self) -> bool:
        return self.schema.has("company")

    def on_context_change(self, context: MonthContext | None) -> None:
        self.days.reset()

    def _is_header_repeat(self, date_cell: FieldValue, amount_cell: FieldValue) -> bool:
        return (isinstance(date_cell, Present) and date_cell.text.upper() == "DATE") or (
            isinstance(amount_cell, Present) and amount_cell.text.upper() == "TOTAL AMOUNT"
        )

    def normalize(self, row: FieldRow, context: MonthContext) -> Outcome:
        if row.is_empty:
            return Skip("empty row")
        width_problem = self.check_width(row)
        if width_problem is not None:
            return width_problem

        date_cell = self.schema.get(row, "date")
        amount_cell = self.schema.get(row, "total_amount")
        if isinstance(date_cell, Missing) and isinstance(amount_cell, Missing):
            return Skip("no date and no amount")
        if self._is_header_repeat(date_cell, amount_cell):
            return Skip("repeated header")
        if isinstance(amount_cell, Missing):
            return Skip("no amount")

        amount = parse_amount(amount_cell.text)
        if isinstance(amount, Invalid):
            return _warning(row, "INVALID_AMOUNT", amount.reason)
        value = amount.value.quantize(CENTS, rounding=ROUND_HALF_UP)
        if value == 0:
            return Skip("zero amount")

        if self.filters_summary_rows and isinstance(self.schema.get(row, "company"), Missing):
            return Skip(f"summary row {value}", summary_row=True)

        resolved = self.days.resolve(date_cell)
        if isinstance(resolved, Invalid):
            code = "INVALID_DAY" if isinstance(date_cell, Present) else "NO_DAY_TO_INHERIT"
            return _warning(row, code, resolved.reason)

        return SalesDayRecord(
            day=resolved.value.day,
            amount=value,
            context=context,
            source_line=row.line_number,
            inherited_day=resolved.value.inherited,
        )
