from __future__ import annotations

from pathlib import Path

import pytest

from lynx_parser.config.loader import (
    ConfigError,
    ParserConfig,
    apply_env_overrides,
    load_config,
)


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.source_path == "./data"
    assert cfg.delimiter == "\t"
    assert cfg.header_keywords == ("RT", "Area", "Name")
    assert cfg.fuzzy_tolerance == 0.1
    assert cfg.error_log_dir == "./logs"
    # keys absent from the file fall back to defaults
    assert cfg.encoding == "utf-8"
    assert cfg.max_workers == 1
    assert cfg.allow_single_section is True


def test_load_config_missing_default_file_gives_defaults(temp_workdir: Path):
    assert load_config() == ParserConfig()


def test_load_config_missing_required_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(missing, required=True)


def test_load_config_empty_file_gives_defaults(write_config: Path):
    write_config.write_text("", encoding="utf-8")
    assert load_config(write_config) == ParserConfig()


def test_load_config_invalid_yaml(write_config: Path):
    write_config.write_text("source_path: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(write_config)


def test_load_config_root_must_be_mapping(write_config: Path):
    write_config.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(write_config)


def test_load_config_extra_field(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_load_config_unknown_encoding(write_config: Path):
    write_config.write_text("encoding: klingon-8\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="unknown encoding"):
        load_config(write_config)


def test_load_config_lists_become_tuples(write_config: Path):
    write_config.write_text("header_keywords: [Conc]\nna_strings: [NA, n/a]\n", encoding="utf-8")
    cfg = load_config(write_config)
    assert cfg.header_keywords == ("Conc",)
    assert cfg.na_strings == ("NA", "n/a")


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LYNX_SOURCE_PATH", "/exports/run7")
    monkeypatch.setenv("LYNX_OUTPUT_PATH", "out/run7.csv")
    cfg = apply_env_overrides(ParserConfig())
    assert cfg.source_path == "/exports/run7"
    assert cfg.output_path == "out/run7.csv"


def test_env_overrides_absent(monkeypatch):
    monkeypatch.delenv("LYNX_SOURCE_PATH", raising=False)
    monkeypatch.delenv("LYNX_OUTPUT_PATH", raising=False)
    cfg = ParserConfig(source_path="./x")
    assert apply_env_overrides(cfg) is cfg
