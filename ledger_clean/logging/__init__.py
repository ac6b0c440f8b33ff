"""Labeled console logging and the diagnostics log."""
