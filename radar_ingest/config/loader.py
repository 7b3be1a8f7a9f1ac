from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load the optional YAML config (config/radar.yml)
- Validate it against config_schema.json
- Apply defaults, then environment overrides (.env is loaded by the CLI)
- Expose is_valid_graph_config() for the InvalidConfig pre-flight check
"""

__all__ = [
    "ConfigError",
    "DefaultSheetConfig",
    "BrandingConfig",
    "GraphConfig",
    "GoogleConfig",
    "RadarConfig",
    "load_config",
    "apply_env_overrides",
    "is_valid_graph_config",
]

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

DEFAULT_TITLE = "Company Tech Radar"
DEFAULT_RINGS = ["Adopt", "Trial", "Assess", "Hold"]
DEFAULT_QUADRANTS = ["Techniques", "Platforms", "Tools", "Languages & Frameworks"]
MAX_RINGS = 4
REQUIRED_QUADRANTS = 4


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DefaultSheetConfig:
    """Sheet loaded when the locator carries no id."""
    sheet_id: str | None = None
    sheet_name: str | None = None
    title: str = DEFAULT_TITLE


@dataclass(frozen=True)
class BrandingConfig:
    company_name: str = "Thoughtworks"
    company_url: str = "https://www.thoughtworks.com"


@dataclass(frozen=True)
class GraphConfig:
    """Fixed ring / quadrant tables and the flag selecting the assembly policy.

    fixed_tables_enabled=False selects the legacy policy (tables derived from
    the data itself, at most 4 rings).
    """
    rings: list[str] = field(default_factory=lambda: list(DEFAULT_RINGS))
    quadrants: list[str] = field(default_factory=lambda: list(DEFAULT_QUADRANTS))
    fixed_tables_enabled: bool = True


@dataclass(frozen=True)
class GoogleConfig:
    api_key: str | None = None  # enables the authenticated Sheets API path


@dataclass(frozen=True)
class RadarConfig:
    default_sheet: DefaultSheetConfig = field(default_factory=DefaultSheetConfig)
    branding: BrandingConfig = field(default_factory=BrandingConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    google: GoogleConfig = field(default_factory=GoogleConfig)
    http_timeout_seconds: float = 30.0


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: If the schema file is missing or not valid JSON, or the
            config data fails validation (unknown keys, wrong types, ...).
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _from_mapping(data: dict[str, Any]) -> RadarConfig:
    sheet_raw = data.get("default_sheet") or {}
    branding_raw = data.get("branding") or {}
    graph_raw = data.get("graph") or {}
    google_raw = data.get("google") or {}
    http_raw = data.get("http") or {}

    return RadarConfig(
        default_sheet=DefaultSheetConfig(
            sheet_id=sheet_raw.get("sheet_id"),
            sheet_name=sheet_raw.get("sheet_name"),
            title=sheet_raw.get("title") or DEFAULT_TITLE,
        ),
        branding=BrandingConfig(**branding_raw),
        graph=GraphConfig(
            rings=list(graph_raw.get("rings", DEFAULT_RINGS)),
            quadrants=list(graph_raw.get("quadrants", DEFAULT_QUADRANTS)),
            fixed_tables_enabled=graph_raw.get("fixed_tables_enabled", True),
        ),
        google=GoogleConfig(
            api_key=google_raw.get("api_key"),
        ),
        http_timeout_seconds=float(http_raw.get("timeout_seconds", 30.0)),
    )


def _env_list(environ: Mapping[str, str], name: str) -> list[str] | None:
    raw = environ.get(name)
    if not raw:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{name} must be a JSON array of strings: {e}") from e
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"{name} must be a JSON array of strings")
    return value


def _env_flag(environ: Mapping[str, str], name: str) -> bool | None:
    raw = environ.get(name)
    if raw is None or raw == "":
        return None
    return raw.strip().lower() in ("1", "true", "yes", "on")


def apply_env_overrides(cfg: RadarConfig, environ: Mapping[str, str] | None = None) -> RadarConfig:
    """Overlay environment variables on top of file/default configuration.

    Environment values win over the YAML file; unset variables keep the
    file value.
    """
    env = os.environ if environ is None else environ

    sheet_id = env.get("DEFAULT_RADAR_SHEET_ID") or env.get("DEFAULT_RADAR_SHEET_URL")
    default_sheet = replace(
        cfg.default_sheet,
        sheet_id=sheet_id or cfg.default_sheet.sheet_id,
        sheet_name=env.get("DEFAULT_RADAR_SHEET_NAME") or cfg.default_sheet.sheet_name,
        title=env.get("DEFAULT_RADAR_TITLE") or cfg.default_sheet.title,
    )
    branding = replace(
        cfg.branding,
        company_name=env.get("COMPANY_NAME") or cfg.branding.company_name,
        company_url=env.get("COMPANY_URL") or cfg.branding.company_url,
    )

    rings = _env_list(env, "RINGS")
    quadrants = _env_list(env, "QUADRANTS")
    fixed = _env_flag(env, "FIXED_TABLE_ASSEMBLY")
    graph = replace(
        cfg.graph,
        rings=rings if rings is not None else cfg.graph.rings,
        quadrants=quadrants if quadrants is not None else cfg.graph.quadrants,
        fixed_tables_enabled=fixed if fixed is not None else cfg.graph.fixed_tables_enabled,
    )
    google = replace(
        cfg.google,
        api_key=env.get("API_KEY") or cfg.google.api_key,
    )

    timeout = cfg.http_timeout_seconds
    if env.get("HTTP_TIMEOUT_SECONDS"):
        try:
            timeout = float(env["HTTP_TIMEOUT_SECONDS"])
        except ValueError as e:
            raise ConfigError(f"HTTP_TIMEOUT_SECONDS must be a number: {e}") from e

    return RadarConfig(
        default_sheet=default_sheet,
        branding=branding,
        graph=graph,
        google=google,
        http_timeout_seconds=timeout,
    )


def load_config(path: Path | None = None, environ: Mapping[str, str] | None = None) -> RadarConfig:
    """Load configuration from an optional YAML file plus the environment.

    ``path=None`` starts from built-in defaults. An explicit path that does
    not exist is an error.
    """
    data: dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise ConfigError(f"config file not found: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid yaml: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("config root must be a mapping")
        _validate_config_schema(data)

    return apply_env_overrides(_from_mapping(data), environ)


def is_valid_graph_config(graph: GraphConfig) -> bool:
    """Fixed tables must name exactly 4 quadrants and 1-4 rings.

    Only meaningful for the fixed-table policy; the legacy policy derives its
    tables from the data.
    """
    if not graph.fixed_tables_enabled:
        return True
    return len(graph.quadrants) == REQUIRED_QUADRANTS and 0 < len(graph.rings) <= MAX_RINGS
