from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from ledger_clean.cli import clean_bulk_customer_monthly, clean_bulk_monthly, clean_bulk_orders
from ledger_clean.services.pipeline import run_pipeline


def test_per_order_output(bulk_orders_file: Path):
    assert clean_bulk_orders([str(bulk_orders_file)]) == 0
    out = bulk_orders_file.with_name("bulk_orders_2023_cleaned.csv")
    assert out.read_text(encoding="utf-8") == (
        "customer_name,bulk_orders_amount,model_no,month_start\n"
        '"ACME",1000,"M1","2023-01-01"\n'
        '"ACME",500,"M3","2023-01-01"\n'
        '"BETA CORP",250.50,"M2","2023-01-01"\n'
        '"ACME",300,"","2023-02-01"\n'
        '"ZETA",200,"M1","2023-02-01"\n'
    )


def test_monthly_summary_output(bulk_orders_file: Path, tmp_path: Path):
    out = tmp_path / "monthly.csv"
    assert clean_bulk_monthly([str(bulk_orders_file), str(out)]) == 0
    assert out.read_text(encoding="utf-8") == (
        "month_start,bulk_orders_count,bulk_orders_amount\n"
        '"2023-01-01",3,1750.50\n'
        '"2023-02-01",2,500\n'
    )


def test_customer_monthly_output(bulk_orders_file: Path, tmp_path: Path):
    out = tmp_path / "customer_monthly.csv"
    assert clean_bulk_customer_monthly([str(bulk_orders_file), str(out)]) == 0
    assert out.read_text(encoding="utf-8") == (
        "month_start,customer_name,bulk_orders_count,bulk_orders_amount,average_bulk_order_value,model_no\n"
        '"2023-01-01","ACME",2,1500,750.00,"M1, M3"\n'
        '"2023-01-01","BETA CORP",1,250.50,250.50,"M2"\n'
        '"2023-02-01","ACME",1,300,300.00,""\n'
        '"2023-02-01","ZETA",1,200,200.00,"M1"\n'
    )


def test_run_result_and_report(bulk_orders_file: Path, tmp_path: Path, capsys):
    result = run_pipeline("bulk-orders", bulk_orders_file, tmp_path / "o.csv")
    assert result.records_written == 5
    assert result.normalized_records == 5
    assert [(d.line_number, d.code) for d in result.warnings] == [(8, "INVALID_AMOUNT"), (11, "NON_POSITIVE_AMOUNT")]
    assert result.errors == []
    assert [(s.month_start, s.record_count, s.total_amount, s.distinct_count) for s in result.month_stats] == [
        ("2023-01-01", 3, Decimal("1750.50"), 2),
        ("2023-02-01", 2, Decimal("500"), 2),
    ]


def test_cli_report_lines(bulk_orders_file: Path, capsys):
    clean_bulk_orders([str(bulk_orders_file)])
    out = capsys.readouterr().out.splitlines()
    assert "INFO 2023-01-01 records=3 amount=1750.50 customers=2" in out
    assert "INFO TOTAL months=2 records=5 amount=2250.50 average=450.10" in out
    assert 'WARN Line 8: Invalid amount "abc"' in out
    assert 'WARN Line 11: Invalid amount "(50)" -> -50' in out


def test_bom_prefixed_export_keeps_first_month(temp_workdir: Path):
    f = temp_workdir / "data" / "bom_2023.csv"
    f.write_bytes(("\ufeffJANUARY\nCustomer Name,Order Amount,Model No.\nACME,10,M1\n").encode("utf-8"))
    result = run_pipeline("bulk-orders", f)
    assert result.normalized_records == 1
    assert result.month_stats[0].month_start == "2023-01-01"
