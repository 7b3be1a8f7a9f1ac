from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from radar_ingest.sources.base import Fetcher
from radar_ingest.sources.fetcher import FetchResponse

"""Thin Google Sheets API v4 client (spreadsheet metadata + one tab's values)."""

__all__ = [
    "SHEETS_API_URL",
    "SheetsClient",
    "SpreadsheetInfo",
    "extract_sheet_id",
    "csv_export_url",
]

SHEETS_API_URL = "https://sheets.googleapis.com/v4/spreadsheets"
_SHEET_URL_RE = re.compile(r"https://docs\.google\.com/spreadsheets/d/(.*?)($|/$|/.*|\?.*)")


def extract_sheet_id(sheet_reference: str) -> str:
    """Sheet id from a docs.google.com URL; anything else is taken as the id itself."""
    match = _SHEET_URL_RE.match(sheet_reference)
    return match.group(1) if match else sheet_reference


def csv_export_url(sheet_id: str) -> str:
    """Public CSV export of the first tab (works without an API key for public sheets)."""
    return f"https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv&gid=0"


@dataclass(frozen=True)
class SpreadsheetInfo:
    title: str
    sheet_names: list[str]

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> SpreadsheetInfo:
        properties = payload.get("properties") or {}
        names = [
            str((s.get("properties") or {}).get("title", ""))
            for s in payload.get("sheets") or []
        ]
        return cls(title=str(properties.get("title", "")), sheet_names=[n for n in names if n])


class SheetsClient:
    def __init__(self, fetcher: Fetcher, api_key: str) -> None:
        self.fetcher = fetcher
        self.api_key = api_key

    def _headers(self, token: str | None) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def get_spreadsheet(self, sheet_id: str, token: str | None) -> FetchResponse:
        return await self.fetcher.fetch(
            f"{SHEETS_API_URL}/{quote(sheet_id, safe='')}",
            params={"key": self.api_key, "fields": "properties.title,sheets.properties.title"},
            headers=self._headers(token),
        )

    async def get_values(self, sheet_id: str, sheet_name: str, token: str | None) -> FetchResponse:
        return await self.fetcher.fetch(
            f"{SHEETS_API_URL}/{quote(sheet_id, safe='')}/values/{quote(sheet_name, safe='')}",
            params={"key": self.api_key},
            headers=self._headers(token),
        )
