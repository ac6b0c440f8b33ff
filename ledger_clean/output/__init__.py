"""Serialization of cleaned records to delimited text."""

from .writer import OutputWriteError, write_rows

__all__ = ["OutputWriteError", "write_rows"]
