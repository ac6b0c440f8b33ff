from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from .records import MonthContext

"""MonthlyAggregate model.

Created lazily by the Aggregator on the first contributing record, mutated only
by the Aggregator, and frozen once aggregation completes. Any attempt to add a
record after freezing raises AggregateFrozenError.
"""

__all__ = [
    "AggregateFrozenError",
    "MonthlyAggregate",
]


class AggregateFrozenError(RuntimeError):
    """Raised when a frozen aggregate receives another contribution."""


@dataclass
class MonthlyAggregate:
    """Running totals for one composite key.

    Key is (year, month) or (year, month, customer_name).
    """
    context: MonthContext
    customer_name: str | None = None
    total_amount: Decimal = Decimal("0")
    total_orders_count: int = 0
    # dict keeps first-seen order; values unused
    _model_numbers: dict[str, None] = field(default_factory=dict, repr=False)
    _frozen: bool = field(default=False, repr=False)

    @property
    def key(self) -> tuple[int, int] | tuple[int, int, str]:
        if self.customer_name is None:
            return self.context.sort_key
        return (*self.context.sort_key, self.customer_name)

    @property
    def month_start(self) -> str:
        return self.context.month_start

    @property
    def model_numbers(self) -> tuple[str, ...]:
        return tuple(self._model_numbers)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add(self, amount: Decimal = Decimal("0"), model_no: str | None = None) -> None:
        if self._frozen:
            raise AggregateFrozenError(f"aggregate {self.key} is frozen")
        self.total_amount += amount
        self.total_orders_count += 1
        if model_no:
            self._model_numbers.setdefault(model_no, None)

    def freeze(self) -> None:
        self._frozen = True
