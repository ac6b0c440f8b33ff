from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

"""Result types returned by the field accessors and value parsers.

Parsers never raise for bad input; they return ``Invalid(reason)`` and the
normalizers turn that into a diagnostic. Field access on a row returns
``Present(text)`` or ``Missing(role)`` so absence has to be handled explicitly.
"""

__all__ = [
    "Parsed",
    "Invalid",
    "ParseResult",
    "Present",
    "Missing",
    "FieldValue",
]

T = TypeVar("T")


@dataclass(frozen=True)
class Parsed(Generic[T]):
    value: T


@dataclass(frozen=True)
class Invalid:
    reason: str


ParseResult = Union[Parsed[T], Invalid]


@dataclass(frozen=True)
class Present:
    text: str  # trimmed, never empty


@dataclass(frozen=True)
class Missing:
    role: str  # column role that had no value


FieldValue = Union[Present, Missing]
