from __future__ import annotations

from pathlib import Path

import pytest

from ledger_clean.config.loader import (
    DEFAULT_CONFIG_PATH,
    ENV_VAR,
    ConfigError,
    LedgerConfig,
    load_config,
    resolve_config_path,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg == LedgerConfig(
        encoding="utf-8",
        delimiter=",",
        quote_char='"',
        warning_preview_limit=1,
        fallback_year=2020,
        diagnostics_log_dir="./logs",
        sheet_name=None,
    )


def test_defaults_without_file():
    cfg = load_config(None)
    assert cfg.encoding == "utf-8"
    assert cfg.warning_preview_limit == 10
    assert cfg.diagnostics_log_dir is None


def test_empty_file_means_defaults(temp_workdir: Path):
    f = temp_workdir / "config" / "empty.yml"
    f.write_text("", encoding="utf-8")
    assert load_config(f) == LedgerConfig()


def test_load_config_missing_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(temp_workdir / "config" / "not_exists.yml")


def test_load_config_extra_field(write_config: Path):
    write_config.write_text(write_config.read_text(encoding="utf-8") + "extra_field: 1\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


@pytest.mark.parametrize(
    "yaml_text",
    ["delimiter: ';;'\n", "warning_preview_limit: -1\n", "fallback_year: 'soon'\n", "encoding: 5\n"],
)
def test_load_config_invalid_values(temp_workdir: Path, yaml_text: str):
    f = temp_workdir / "config" / "bad.yml"
    f.write_text(yaml_text, encoding="utf-8")
    with pytest.raises(ConfigError, match="config validation failed"):
        load_config(f)


def test_invalid_yaml_and_non_mapping(temp_workdir: Path):
    f = temp_workdir / "config" / "broken.yml"
    f.write_text("encoding: [utf-8\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(f)
    f.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(f)


def test_resolve_order(temp_workdir: Path, monkeypatch):
    assert resolve_config_path() is None
    (temp_workdir / DEFAULT_CONFIG_PATH).write_text("", encoding="utf-8")
    assert resolve_config_path() == DEFAULT_CONFIG_PATH
    monkeypatch.setenv(ENV_VAR, "from_env.yml")
    assert resolve_config_path() == Path("from_env.yml")
    assert resolve_config_path("explicit.yml") == Path("explicit.yml")
