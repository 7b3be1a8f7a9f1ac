from __future__ import annotations

import logging
from typing import Any

from radar_ingest.auth.consent import ConsentProvider
from radar_ingest.auth.flow import AuthFlow
from radar_ingest.auth.session import AuthSession
from radar_ingest.auth.sheets_client import (
    SheetsClient,
    SpreadsheetInfo,
    csv_export_url,
    extract_sheet_id,
)
from radar_ingest.exceptions import ExceptionMessages, SheetNotFoundError, UnauthorizedError
from radar_ingest.models.load_result import LoadResult
from radar_ingest.models.radar_metadata import RadarMetadata
from radar_ingest.models.source import SourceKind
from radar_ingest.sanitize.content_validator import ContentValidator

from .base import DocumentLoader
from .csv_loader import CSVLoader
from .fetcher import FetchResponse

logger = logging.getLogger(__name__)

__all__ = [
    "SheetLoader",
]

FORBIDDEN = 403


class SheetLoader(DocumentLoader):
    """Google Sheet loader.

    Without an API key the sheet is read through its public CSV export
    (CSVLoader semantics). With a key, the Sheets API is used and private
    sheets go through AuthFlow.
    """

    source_kind = SourceKind.SHEET

    def __init__(
        self,
        sheet_reference: str,
        sheet_name: str | None = None,
        *,
        api_key: str | None,
        auth_session: AuthSession,
        consent_provider: ConsentProvider | None = None,
        legacy_title: bool = False,
        fallback_title: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.sheet_reference = sheet_reference
        self.sheet_name = sheet_name
        self.sheet_id = extract_sheet_id(sheet_reference)
        self.api_key = api_key
        self.auth = AuthFlow(auth_session, consent_provider)
        self.legacy_title = legacy_title  # legacy assembly titles are "<document> - <tab>"
        self.fallback_title = fallback_title
        self.error = False

    async def build(self) -> LoadResult:
        if not self.api_key:
            logger.info("no API key configured, reading the public CSV export of the sheet")
            csv_loader = CSVLoader(
                csv_export_url(self.sheet_id),
                title=self.fallback_title or self.sheet_id,
                fetcher=self.fetcher,
                sanitizer=self.sanitizer,
                indicator=self.indicator,
            )
            return await csv_loader.init().build()
        return await self.authenticate(force=False)

    async def authenticate(self, force: bool = False) -> LoadResult:
        """Authorize and load. force=True is the switch-account retry."""
        self.error = False
        self.indicator.start()
        operation = (lambda: self._authenticate(force=True)) if force else self._load
        result = await self._run(operation)
        self.error = result.error is not None
        return result

    async def _load(self) -> LoadResult:
        return await self._authenticate(force=False)

    async def _authenticate(self, force: bool) -> LoadResult:
        client = SheetsClient(self.fetcher, self.api_key or "")

        self.indicator.stage("authorizing")
        token = await self.auth.begin(force)
        if force and token is None:
            raise UnauthorizedError(ExceptionMessages.UNAUTHORIZED)

        response = await client.get_spreadsheet(self.sheet_id, token)
        if response.status == FORBIDDEN and not force and self.auth.should_escalate():
            logger.info("sheet is not public, requesting interactive consent")
            token = await self.auth.request_consent()
            if token is None:
                raise UnauthorizedError(ExceptionMessages.UNAUTHORIZED)
            response = await client.get_spreadsheet(self.sheet_id, token)

        return await self._process_sheet_response(client, response, token)

    def _check(self, response: FetchResponse) -> None:
        if response.status == FORBIDDEN:
            self.auth.mark_denied()
            raise UnauthorizedError(ExceptionMessages.UNAUTHORIZED)
        if not response.ok:
            raise SheetNotFoundError(ExceptionMessages.SHEET_NOT_FOUND)

    async def _process_sheet_response(
        self, client: SheetsClient, response: FetchResponse, token: str | None
    ) -> LoadResult:
        self._check(response)
        info = SpreadsheetInfo.from_payload(response.json())
        if not info.sheet_names:
            raise SheetNotFoundError(ExceptionMessages.SHEET_NOT_FOUND)

        sheet_name = self.sheet_name or info.sheet_names[0]
        if sheet_name not in info.sheet_names:
            logger.debug(f"tab {sheet_name!r} not in {info.sheet_names}")
            raise SheetNotFoundError(ExceptionMessages.SHEET_NOT_FOUND)

        self.indicator.stage("fetching")
        values_response = await client.get_values(self.sheet_id, sheet_name, token)
        self._check(values_response)
        values: list[list[Any]] = values_response.json().get("values") or []

        # one check of the header row, however many tabs the document has
        self.indicator.stage("validating")
        validator = ContentValidator(values[0] if values else [])
        validator.verify_content()
        validator.verify_headers()

        self.indicator.stage("sanitizing")
        header, rows = values[0], values[1:]
        records = [self.sanitizer.sanitize_for_protected_sheet(row, header) for row in rows]

        self.auth.mark_success()
        title = f"{info.title} - {sheet_name}" if self.legacy_title else info.title
        metadata = RadarMetadata(
            title=title,
            current_sheet=sheet_name,
            alternative_sheets=[n for n in info.sheet_names if n != sheet_name],
        )
        logger.info(f"sheet loaded: {len(records)} blips from tab {sheet_name!r}")
        return LoadResult.ready(self.source_kind, records, metadata)
