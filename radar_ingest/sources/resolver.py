from __future__ import annotations

import logging
import re
from urllib.parse import parse_qs, quote, unquote_plus

from radar_ingest.config.loader import RadarConfig
from radar_ingest.models.source import SourceDescriptor, SourceType

"""SourceResolver: page locator -> SourceDescriptor.

Priority (first match wins):
1. id ends with .csv   -> CSV
2. id ends with .json  -> JSON
3. google.com domain in the query and an id -> Google Sheet (+ sheetName)
4. no id at all, default sheet configured -> configured default sheet
5. otherwise -> NONE (caller shows the input form with the default title)

Pure string handling, no network I/O.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "resolve_source",
    "get_document_or_sheet_id",
    "get_sheet_name",
    "domain_name",
    "file_name",
    "strip_extension",
    "locator_for",
]

GOOGLE_DOMAIN = "google.com"
_DOMAIN_RE = re.compile(r".+://([^\\/]+)")
_FILE_NAME_RE = re.compile(r"([^\\/]+)$")
_EXTENSION_RE = re.compile(r"\.(csv|json)$", re.IGNORECASE)


def _query_string(locator: str) -> str:
    return locator.split("?", 1)[1] if "?" in locator else locator


def _params(locator: str) -> dict[str, list[str]]:
    return parse_qs(_query_string(locator), keep_blank_values=False)


def get_document_or_sheet_id(locator: str) -> str | None:
    params = _params(locator)
    for key in ("documentId", "sheetId"):
        values = params.get(key)
        if values and values[0].strip():
            return values[0].strip()
    return None


def get_sheet_name(locator: str) -> str | None:
    values = _params(locator).get("sheetName")
    return values[0] if values else None


def domain_name(locator: str) -> str | None:
    """Host of the (last) URL embedded in the query string, if any."""
    match = _DOMAIN_RE.match(unquote_plus(_query_string(locator)))
    return match.group(1) if match else None


def file_name(url: str) -> str:
    """Last path segment of a URL (URL-decoded, '+' read as space)."""
    match = _FILE_NAME_RE.search(unquote_plus(url))
    return match.group(1) if match else url


def strip_extension(title: str) -> str:
    return _EXTENSION_RE.sub("", title)


def locator_for(document_id: str, sheet_name: str | None = None) -> str:
    """Build a page locator (query string) for a bare document URL or sheet id."""
    query = f"documentId={quote(document_id, safe='')}"
    if sheet_name:
        query += f"&sheetName={quote(sheet_name, safe='')}"
    return "?" + query


def resolve_source(locator: str | None, config: RadarConfig) -> SourceDescriptor:
    locator = locator or ""
    param_id = get_document_or_sheet_id(locator)

    if param_id and param_id.lower().endswith(".csv"):
        return SourceDescriptor(SourceType.CSV, document_id=param_id)

    if param_id and param_id.lower().endswith(".json"):
        return SourceDescriptor(SourceType.JSON, document_id=param_id)

    domain = domain_name(locator)
    if param_id and domain and domain.lower().endswith(GOOGLE_DOMAIN):
        return SourceDescriptor(
            SourceType.GOOGLE_SHEET,
            document_id=param_id,
            sheet_name=get_sheet_name(locator),
        )

    default_sheet = config.default_sheet
    if not param_id and default_sheet.sheet_id:
        logger.debug(f"no document id in locator, using configured default sheet {default_sheet.sheet_id}")
        return SourceDescriptor(
            SourceType.CONFIGURED_DEFAULT,
            document_id=default_sheet.sheet_id,
            sheet_name=default_sheet.sheet_name,
            title=default_sheet.title,
        )

    return SourceDescriptor(SourceType.NONE, title=default_sheet.title)
