# tests/unit/test_settings.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from helixcompare.inputs.settings import AppSettings, SettingsLoader, load_settings


def test_defaults_without_file():
    cfg = load_settings()
    assert cfg.run.out == "data/latest.csv"
    assert cfg.run.max_pages_per_operator == 80
    assert cfg.run.operators == []
    assert cfg.run.push is False
    assert cfg.sink.configured is False


def test_file_values(tmp_path: Path):
    p = tmp_path / "helix.json"
    p.write_text(
        json.dumps({"run": {"out": "out/x.csv", "operators": "Salt, Yallo", "push": True}, "sink": {"table": "Offres"}}),
        encoding="utf-8",
    )
    cfg = SettingsLoader().load(p)
    assert cfg.run.out == "out/x.csv"
    assert cfg.run.operators == ["Salt", "Yallo"]
    assert cfg.run.push is True
    assert cfg.sink.table == "Offres"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("HELIX_OUT", "env.csv")
    monkeypatch.setenv("HELIX_MAX_PAGES", "5")
    monkeypatch.setenv("HELIX_OPERATORS", "Sunrise,Salt")
    monkeypatch.setenv("HELIX_PUSH", "1")
    monkeypatch.setenv("AIRTABLE_TOKEN", "tok")
    monkeypatch.setenv("AIRTABLE_BASE", "appX")
    monkeypatch.setenv("AIRTABLE_TABLE", "Offres")

    cfg = load_settings()
    assert cfg.run.out == "env.csv"
    assert cfg.run.max_pages_per_operator == 5
    assert cfg.run.operators == ["Sunrise", "Salt"]
    assert cfg.run.push is True
    assert cfg.sink.configured is True


def test_bad_numeric_env_is_ignored(monkeypatch):
    monkeypatch.setenv("HELIX_MAX_PAGES", "lots")
    assert load_settings().run.max_pages_per_operator == 80


def test_invalid_json(tmp_path: Path):
    p = tmp_path / "bad.json"
    p.write_text("{nope", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid JSON"):
        SettingsLoader().load(p)


def test_validation_failure(tmp_path: Path):
    p = tmp_path / "bad.json"
    p.write_text(json.dumps({"run": {"max_pages_per_operator": 0}}), encoding="utf-8")
    with pytest.raises(ValueError, match="validation failed"):
        SettingsLoader().load(p)


def test_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        SettingsLoader().load(tmp_path / "absent.json")


def test_with_overrides_is_non_destructive():
    loader = SettingsLoader()
    cfg = AppSettings()
    out = loader.with_overrides(cfg, out="cli.csv", max_pages=3, push=True)
    assert out.run.out == "cli.csv"
    assert out.run.max_pages_per_operator == 3
    assert out.run.push is True
    assert cfg.run.out == "data/latest.csv"
    with pytest.raises(ValueError):
        loader.with_overrides(cfg, max_pages=0)
