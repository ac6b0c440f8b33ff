# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from ledger_clean.logging.init import reset_logging

BULK_ORDERS_TEXT = """AMMEX BULK ORDERS
JANUARY
Customer Name,Order Amount,Model No.
ACME,"1,000",M1
beta  corp,250.50,M2
ACME,500,M3
,,
Gamma,abc,M4
FEBRUARY
Customer Name,Order Amount,Model No.
Delta,(50),M5
Acme,300,
Zeta,200,M1
MARCH
Omega,999,M9
"""

ITEMS_TEXT = """JANUARY
Model No.,Category
zx-200,Power Tools
ab-100,  Hand   Tools
,Misc
MARCH
Model No.,Category
cd-300,Garden
ab-100,Hand Tools
"""

SALES_TEXT = """SALES REPORT MONTH OF JAN. 2022
DATE,TOTAL AMOUNT,COMPANY
1,"1,000.00",ACME
,500,BETA
2,(200),GAMMA
,"1,300.00",
SALES MONTH OF FEB 2022,,
,100,ACME
3,50.555,BETA
x,10,ZETA
,0,ACME
"""


@pytest.fixture(autouse=True)
def _fresh_logging():
    # each test gets a handler bound to the current (captured) stdout
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("LEDGER_CLEAN_CONFIG", raising=False)
        yield p


@pytest.fixture()
def bulk_orders_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "bulk_orders_2023.csv"
    f.write_text(BULK_ORDERS_TEXT, encoding="utf-8")
    return f


@pytest.fixture()
def items_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "items_2024.csv"
    f.write_text(ITEMS_TEXT, encoding="utf-8")
    return f


@pytest.fixture()
def sales_file(temp_workdir: Path) -> Path:
    f = temp_workdir / "data" / "sales.csv"
    f.write_text(SALES_TEXT, encoding="utf-8")
    return f


@pytest.fixture()
def sample_config_yaml() -> str:
    return """encoding: utf-8
delimiter: ","
quote_char: '"'
warning_preview_limit: 1
fallback_year: 2020
diagnostics_log_dir: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "clean.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
