"""Scanning, normalization, aggregation and run orchestration."""
