"""Cleaning pipeline for hand-maintained ledger exports."""

__version__ = "0.1.0"
