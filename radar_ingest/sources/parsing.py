from __future__ import annotations

import io
import json
from typing import Any

import pandas as pd

"""Text -> RawRow parsing for file sources.

CSV goes through pandas with every cell read as a string and NA coercion
off, so "NA"/"null"/"" stay literal text. JSON must be an array of objects;
values are stringified the way a CSV export would spell them.
"""

__all__ = [
    "DocumentParseError",
    "parse_csv",
    "parse_json",
]


class DocumentParseError(Exception):
    """The fetched body could not be parsed at all."""


def parse_csv(text: str) -> list[dict[str, str]]:
    if not text.strip():
        return []
    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise DocumentParseError(f"invalid csv: {e}") from e
    df.columns = [str(c) for c in df.columns]
    return df.to_dict(orient="records")


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def parse_json(text: str) -> list[dict[str, str]]:
    """Parse a JSON array of objects.

    Raises DocumentParseError for unparseable text. A parsed document that is
    not an array yields [] so it fails content validation instead.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentParseError(f"invalid json: {e}") from e
    if not isinstance(data, list):
        return []
    rows: list[dict[str, str]] = []
    for item in data:
        if not isinstance(item, dict):
            # only the first element's keys matter for validation; keep shape
            rows.append({})
            continue
        rows.append({str(k): _cell(v) for k, v in item.items()})
    return rows
