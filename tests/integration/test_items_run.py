from __future__ import annotations

from pathlib import Path

from ledger_clean.cli import clean_items
from ledger_clean.services.pipeline import run_pipeline


def test_items_output(items_file: Path):
    assert clean_items([str(items_file)]) == 0
    out = items_file.with_name("items_2024_cleaned.csv")
    assert out.read_text(encoding="utf-8") == (
        "month_start,model_no,category_name\n"
        '"2024-01-01","AB-100","Hand Tools"\n'
        '"2024-01-01","ZX-200","Power Tools"\n'
        '"2024-03-01","AB-100","Hand Tools"\n'
        '"2024-03-01","CD-300","Garden"\n'
    )


def test_items_missing_model_warning(items_file: Path, tmp_path: Path):
    result = run_pipeline("items", items_file, tmp_path / "items.csv")
    [d] = result.diagnostics
    assert (d.line_number, d.code, d.message) == (5, "MISSING_FIELD", "Empty model number")
