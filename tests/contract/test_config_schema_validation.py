from __future__ import annotations

import json
from pathlib import Path

import jsonschema
import pytest
import yaml
from jsonschema.exceptions import ValidationError

from radar_ingest.config.loader import SCHEMA_PATH

"""Config schema contract: the shipped example config validates, typos do not."""

EXAMPLE_CONFIG = Path(__file__).resolve().parents[2] / "config" / "radar.yml"


@pytest.fixture(scope="module")
def schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_example_config_is_valid(schema):
    jsonschema.validate(yaml.safe_load(EXAMPLE_CONFIG.read_text(encoding="utf-8")), schema)


def test_empty_config_is_valid(schema):
    jsonschema.validate({}, schema)


@pytest.mark.parametrize(
    "config",
    [
        {"unknown": 1},
        {"graph": {"ringz": ["Adopt"]}},
        {"graph": {"rings": "Adopt,Hold"}},
        {"graph": {"rings": [""]}},
        {"graph": {"fixed_tables_enabled": "yes"}},
        {"http": {"timeout_seconds": 0}},
        {"default_sheet": {"sheet_id": 42}},
        {"google": {"client_id": "abc.apps.googleusercontent.com"}},
    ],
)
def test_invalid_configs_rejected(schema, config):
    with pytest.raises(ValidationError):
        jsonschema.validate(config, schema)
