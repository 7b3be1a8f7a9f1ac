from __future__ import annotations

from dataclasses import fields
from pathlib import Path

import pytest

from radar_ingest.config.loader import (
    DEFAULT_QUADRANTS,
    DEFAULT_RINGS,
    ConfigError,
    GoogleConfig,
    GraphConfig,
    is_valid_graph_config,
    load_config,
)


def test_defaults_without_file():
    cfg = load_config(None, environ={})
    assert cfg.default_sheet.sheet_id is None
    assert cfg.default_sheet.title == "Company Tech Radar"
    assert cfg.graph.rings == DEFAULT_RINGS
    assert cfg.graph.quadrants == DEFAULT_QUADRANTS
    assert cfg.graph.fixed_tables_enabled is True
    assert cfg.google.api_key is None
    assert cfg.http_timeout_seconds == 30.0


def test_load_from_yaml(write_config: Path):
    cfg = load_config(write_config, environ={})
    assert cfg.default_sheet.title == "Acme Tech Radar"
    assert cfg.branding.company_name == "Acme"
    assert cfg.branding.company_url == "https://acme.example"
    assert cfg.http_timeout_seconds == 10.0


def test_missing_explicit_file(temp_workdir: Path):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "config" / "nope.yml", environ={})


def test_invalid_yaml(temp_workdir: Path):
    p = temp_workdir / "config" / "radar.yml"
    p.write_text("graph: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config(p, environ={})


def test_root_must_be_mapping(temp_workdir: Path):
    p = temp_workdir / "config" / "radar.yml"
    p.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_config(p, environ={})


def test_empty_file_uses_defaults(temp_workdir: Path):
    p = temp_workdir / "config" / "radar.yml"
    p.write_text("", encoding="utf-8")
    assert load_config(p, environ={}).graph.rings == DEFAULT_RINGS


def test_env_overrides_file(write_config: Path):
    env = {
        "DEFAULT_RADAR_SHEET_ID": "1EnvSheet",
        "DEFAULT_RADAR_SHEET_NAME": "Latest",
        "DEFAULT_RADAR_TITLE": "Env Radar",
        "COMPANY_NAME": "Globex",
        "RINGS": '["Use", "Avoid"]',
        "QUADRANTS": '["A", "B", "C", "D"]',
        "FIXED_TABLE_ASSEMBLY": "false",
        "API_KEY": "k",
        "HTTP_TIMEOUT_SECONDS": "5",
    }
    cfg = load_config(write_config, environ=env)
    assert cfg.default_sheet.sheet_id == "1EnvSheet"
    assert cfg.default_sheet.sheet_name == "Latest"
    assert cfg.default_sheet.title == "Env Radar"
    assert cfg.branding.company_name == "Globex"
    assert cfg.branding.company_url == "https://acme.example"
    assert cfg.graph.rings == ["Use", "Avoid"]
    assert cfg.graph.quadrants == ["A", "B", "C", "D"]
    assert cfg.graph.fixed_tables_enabled is False
    assert cfg.google.api_key == "k"
    assert cfg.http_timeout_seconds == 5.0


def test_sheet_url_variable_is_accepted():
    cfg = load_config(None, environ={"DEFAULT_RADAR_SHEET_URL": "https://docs.google.com/spreadsheets/d/1X"})
    assert cfg.default_sheet.sheet_id == "https://docs.google.com/spreadsheets/d/1X"


def test_process_environment_used_by_default(monkeypatch):
    monkeypatch.setenv("API_KEY", "from-env")
    assert load_config(None).google.api_key == "from-env"


@pytest.mark.parametrize("value", ["Adopt,Hold", '{"a": 1}', "[1, 2]"])
def test_env_list_must_be_json_string_array(value):
    with pytest.raises(ConfigError, match="RINGS"):
        load_config(None, environ={"RINGS": value})


def test_env_timeout_must_be_number():
    with pytest.raises(ConfigError, match="HTTP_TIMEOUT_SECONDS"):
        load_config(None, environ={"HTTP_TIMEOUT_SECONDS": "soon"})


@pytest.mark.parametrize(
    "graph, expected",
    [
        (GraphConfig(), True),
        (GraphConfig(rings=["Adopt"]), True),
        (GraphConfig(rings=[]), False),
        (GraphConfig(rings=["a", "b", "c", "d", "e"]), False),
        (GraphConfig(quadrants=["a", "b", "c"]), False),
        (GraphConfig(quadrants=["a", "b", "c", "d", "e"]), False),
        (GraphConfig(rings=[], quadrants=[], fixed_tables_enabled=False), True),
    ],
)
def test_is_valid_graph_config(graph, expected):
    assert is_valid_graph_config(graph) is expected


def test_google_section_holds_only_the_api_key():
    assert [f.name for f in fields(GoogleConfig)] == ["api_key"]
