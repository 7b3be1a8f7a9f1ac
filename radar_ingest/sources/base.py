from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any, ClassVar, Protocol

from radar_ingest.exceptions import (
    InvalidContentError,
    MalformedDataError,
    SourceFileNotFoundError,
)
from radar_ingest.models.blip_record import CanonicalBlipRecord
from radar_ingest.models.load_result import LoadResult
from radar_ingest.models.source import SourceKind
from radar_ingest.sanitize.content_validator import ContentValidator
from radar_ingest.sanitize.row_sanitizer import RowSanitizer
from radar_ingest.services.error_classifier import classify_error
from radar_ingest.services.progress import LoadingIndicator

from .fetcher import FetchError, FetchResponse
from .parsing import DocumentParseError

"""DocumentLoader contract shared by the CSV, JSON and Google Sheet loaders.

init() starts the loading indicator (no I/O); build() performs the load
and always returns a LoadResult. Every failure raised inside a load is
caught here and classified, so nothing propagates to the caller.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "Fetcher",
    "DocumentLoader",
    "FileDocumentLoader",
    "SAMPLE_ROWS",
]

SAMPLE_ROWS = 3


class Fetcher(Protocol):
    async def fetch(
        self,
        url: str,
        *,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> FetchResponse: ...


class DocumentLoader(ABC):
    source_kind: ClassVar[SourceKind]

    def __init__(
        self,
        *,
        fetcher: Fetcher,
        sanitizer: RowSanitizer | None = None,
        indicator: LoadingIndicator | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.sanitizer = sanitizer or RowSanitizer()
        self.indicator = indicator or LoadingIndicator()

    def init(self) -> DocumentLoader:
        self.indicator.start()
        return self

    async def build(self) -> LoadResult:
        return await self._run(self._load)

    @abstractmethod
    async def _load(self) -> LoadResult:
        """Fetch, validate and sanitize. May raise; _run classifies."""

    async def _run(self, operation: Callable[[], Awaitable[LoadResult]]) -> LoadResult:
        try:
            return await operation()
        except Exception as e:  # loader boundary: classify everything
            logger.debug(f"{self.source_kind.value} load failed: {type(e).__name__}: {e}")
            return LoadResult.failed(classify_error(e, self.source_kind))
        finally:
            self.indicator.stop()


class FileDocumentLoader(DocumentLoader):
    """Shared flow of the URL-backed CSV and JSON loaders."""

    current_sheet_label: ClassVar[str]
    not_found_message: ClassVar[str]
    invalid_content_message: ClassVar[str]

    def __init__(self, url: str, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.url = url

    async def _fetch_text(self) -> str:
        self.indicator.stage("fetching")
        try:
            response = await self.fetcher.fetch(self.url)
        except FetchError as e:
            raise SourceFileNotFoundError(self.not_found_message) from e
        if not response.ok:
            raise SourceFileNotFoundError(self.not_found_message, status=response.status)
        return response.text

    def _parse_failed(self, error: DocumentParseError) -> SourceFileNotFoundError:
        # an unparseable body is reported like an unreachable file
        logger.debug(f"{self.url}: {error}")
        return SourceFileNotFoundError(self.not_found_message)

    def _validate_and_sanitize(self, rows: list[dict[str, str]]) -> list[CanonicalBlipRecord]:
        # keys of the first row, not parser metadata: the row may have been repaired
        column_names = list(rows[0].keys()) if rows else []
        self.indicator.stage("validating")
        validator = ContentValidator(column_names)
        try:
            validator.verify_content()
            validator.verify_headers()
        except MalformedDataError as e:
            raise InvalidContentError(
                f"{self.invalid_content_message} {e}",
                headers=validator.column_names,
                sample_rows=rows[:SAMPLE_ROWS],
            ) from e

        self.indicator.stage("sanitizing")
        return [self.sanitizer.sanitize(row) for row in rows]
