from __future__ import annotations

import logging
import re
from typing import Any

from radar_ingest.exceptions import ExceptionMessages
from radar_ingest.models.load_result import LoadResult
from radar_ingest.models.radar_metadata import CSV_SHEET_LABEL, RadarMetadata
from radar_ingest.models.source import SourceKind

from .base import SAMPLE_ROWS, FileDocumentLoader
from .parsing import DocumentParseError, parse_csv
from .resolver import file_name, strip_extension

logger = logging.getLogger(__name__)

__all__ = [
    "CSVLoader",
    "find_malformed_name_key",
    "repair_malformed_header",
]

# Some spreadsheet export paths mis-encode the leading header as an escaped
# character ("\" or "\\" or a short quote/slash fragment).
_MALFORMED_KEY_CHARS = re.compile(r"[\\/\"'`]")


def find_malformed_name_key(keys: list[str]) -> str | None:
    for key in keys:
        if key in ("\\", "\\\\") or (len(key) <= 2 and _MALFORMED_KEY_CHARS.search(key)):
            return key
    return None


def repair_malformed_header(rows: list[dict[str, str]]) -> list[dict[str, str]]:
    """Rename a malformed leading header to ``name`` in every row.

    Only applies when the first row has no ``name`` key. Key order is
    preserved; the renamed key takes the malformed key's position.
    """
    if not rows:
        return rows
    keys = list(rows[0].keys())
    bad_key = find_malformed_name_key(keys)
    if bad_key is None or "name" in keys:
        return rows

    logger.debug(f"remapping malformed header {bad_key!r} to 'name'")
    return [{("name" if k == bad_key else k): v for k, v in row.items()} for row in rows]


class CSVLoader(FileDocumentLoader):
    source_kind = SourceKind.CSV
    current_sheet_label = CSV_SHEET_LABEL
    not_found_message = ExceptionMessages.CSV_NOT_FOUND
    invalid_content_message = ExceptionMessages.INVALID_CSV_CONTENT

    def __init__(self, url: str, *, title: str | None = None, **kwargs: Any) -> None:
        super().__init__(url, **kwargs)
        self.title = title  # overrides the file-name title (public sheet export)

    async def _load(self) -> LoadResult:
        text = await self._fetch_text()
        try:
            rows = parse_csv(text)
        except DocumentParseError as e:
            raise self._parse_failed(e) from e

        logger.debug(f"Parsed CSV columns: {list(rows[0].keys()) if rows else []}")
        logger.debug(f"Parsed CSV first rows sample: {rows[:SAMPLE_ROWS]}")

        rows = repair_malformed_header(rows)
        records = self._validate_and_sanitize(rows)
        metadata = RadarMetadata(
            title=self.title or strip_extension(file_name(self.url)),
            current_sheet=self.current_sheet_label,
            alternative_sheets=[],
        )
        logger.info(f"CSV loaded: {len(records)} blips from {self.url}")
        return LoadResult.ready(self.source_kind, records, metadata)
