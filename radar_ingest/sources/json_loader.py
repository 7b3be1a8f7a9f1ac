from __future__ import annotations

import logging

from radar_ingest.exceptions import ExceptionMessages
from radar_ingest.models.load_result import LoadResult
from radar_ingest.models.radar_metadata import JSON_SHEET_LABEL, RadarMetadata
from radar_ingest.models.source import SourceKind

from .base import FileDocumentLoader
from .parsing import DocumentParseError, parse_json
from .resolver import file_name, strip_extension

logger = logging.getLogger(__name__)

__all__ = [
    "JSONLoader",
]


class JSONLoader(FileDocumentLoader):
    """Loads a JSON array of blip objects. Keys are trusted as-is (no header repair)."""

    source_kind = SourceKind.JSON
    current_sheet_label = JSON_SHEET_LABEL
    not_found_message = ExceptionMessages.JSON_NOT_FOUND
    invalid_content_message = ExceptionMessages.INVALID_JSON_CONTENT

    async def _load(self) -> LoadResult:
        text = await self._fetch_text()
        try:
            rows = parse_json(text)
        except DocumentParseError as e:
            raise self._parse_failed(e) from e

        records = self._validate_and_sanitize(rows)
        metadata = RadarMetadata(
            title=strip_extension(file_name(self.url)),
            current_sheet=self.current_sheet_label,
            alternative_sheets=[],
        )
        logger.info(f"JSON loaded: {len(records)} blips from {self.url}")
        return LoadResult.ready(self.source_kind, records, metadata)
