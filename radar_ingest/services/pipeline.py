from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from radar_ingest.assembly.assembler import assemble_radar
from radar_ingest.assembly.policies import AssemblyPolicy, LegacyAssemblyPolicy, select_policy
from radar_ingest.auth.consent import ConsentProvider
from radar_ingest.auth.session import AuthSession
from radar_ingest.config.loader import RadarConfig, is_valid_graph_config
from radar_ingest.exceptions import ExceptionMessages, InvalidConfigError, RadarError
from radar_ingest.models.load_result import LoadPhase, LoadResult
from radar_ingest.models.radar import Radar
from radar_ingest.models.source import SourceDescriptor, SourceType
from radar_ingest.sanitize.row_sanitizer import RowSanitizer
from radar_ingest.services.error_classifier import classify_error
from radar_ingest.services.messages import render_default_title
from radar_ingest.services.progress import LoadingIndicator
from radar_ingest.sources.base import DocumentLoader, Fetcher
from radar_ingest.sources.csv_loader import CSVLoader
from radar_ingest.sources.fetcher import HttpFetcher
from radar_ingest.sources.json_loader import JSONLoader
from radar_ingest.sources.resolver import resolve_source
from radar_ingest.sources.sheet_loader import SheetLoader

"""Pipeline orchestration: locator -> loader -> assembler -> renderer.

Loads are not serialized against each other: whichever completes last
becomes current_result. The only state shared between loads is the
AuthSession.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "RadarPipeline",
    "Renderer",
]

Renderer = Callable[[Radar], Any]


class RadarPipeline:
    def __init__(
        self,
        config: RadarConfig,
        *,
        fetcher: Fetcher | None = None,
        consent_provider: ConsentProvider | None = None,
        auth_session: AuthSession | None = None,
        renderer: Renderer | None = None,
        sanitizer: RowSanitizer | None = None,
        indicator_factory: Callable[[], LoadingIndicator] | None = None,
    ) -> None:
        self.config = config
        self._owned_fetcher = fetcher is None
        self.fetcher: Fetcher = fetcher or HttpFetcher(timeout_seconds=config.http_timeout_seconds)
        self.consent_provider = consent_provider
        self.auth_session = auth_session or AuthSession()
        self.renderer = renderer
        self.sanitizer = sanitizer or RowSanitizer()
        self.indicator_factory = indicator_factory or LoadingIndicator
        self.policy: AssemblyPolicy = select_policy(config.graph)

        self.input_enabled = True
        self.current_result: LoadResult | None = None
        self.last_sheet_loader: SheetLoader | None = None

    def create_loader(self, descriptor: SourceDescriptor) -> DocumentLoader | None:
        common: dict[str, Any] = {
            "fetcher": self.fetcher,
            "sanitizer": self.sanitizer,
            "indicator": self.indicator_factory(),
        }
        if descriptor.source_type is SourceType.CSV:
            return CSVLoader(descriptor.document_id or "", **common)
        if descriptor.source_type is SourceType.JSON:
            return JSONLoader(descriptor.document_id or "", **common)
        if descriptor.source_type in (SourceType.GOOGLE_SHEET, SourceType.CONFIGURED_DEFAULT):
            return SheetLoader(
                descriptor.document_id or "",
                descriptor.sheet_name,
                api_key=self.config.google.api_key,
                auth_session=self.auth_session,
                consent_provider=self.consent_provider,
                legacy_title=isinstance(self.policy, LegacyAssemblyPolicy),
                fallback_title=descriptor.title,
                **common,
            )
        return None

    def _check_config(self) -> LoadResult | None:
        if is_valid_graph_config(self.config.graph):
            return None
        error = classify_error(InvalidConfigError(ExceptionMessages.INVALID_CONFIG), None)
        logger.error(f"config: {error.message}")
        self.input_enabled = False
        return LoadResult.failed(error)

    async def load(self, locator: str | None) -> LoadResult:
        """Run one load for the given page locator and return its result."""
        if not self.input_enabled and self.current_result is not None:
            return self.current_result

        invalid = self._check_config()
        if invalid is not None:
            self.current_result = invalid
            return invalid

        descriptor = resolve_source(locator, self.config)
        logger.debug(f"resolved source: {descriptor.source_type.value}")
        loader = self.create_loader(descriptor)
        if loader is None:
            result = LoadResult(
                phase=LoadPhase.AWAITING_INPUT,
                title=render_default_title(self.config.branding, descriptor.title),
            )
            self.current_result = result
            return result

        if isinstance(loader, SheetLoader):
            self.last_sheet_loader = loader

        self.current_result = LoadResult(phase=LoadPhase.LOADING, source_kind=loader.source_kind)
        result = self._finish(await loader.init().build())
        self.current_result = result
        return result

    async def switch_account(self) -> LoadResult | None:
        """Retry the last sheet load with a forced account choice.

        A successful retry replaces the unauthorized result in place.
        """
        loader = self.last_sheet_loader
        if loader is None:
            logger.debug("switch account requested without a sheet load")
            return self.current_result
        self.current_result = LoadResult(phase=LoadPhase.LOADING, source_kind=loader.source_kind)
        result = self._finish(await loader.authenticate(force=True))
        self.current_result = result
        return result

    def _finish(self, result: LoadResult) -> LoadResult:
        if not result.ok or result.metadata is None or result.source_kind is None:
            return result
        try:
            radar = assemble_radar(result.records, result.metadata, self.policy)
        except RadarError as e:
            return LoadResult.failed(classify_error(e, result.source_kind))
        result.radar = radar
        if self.renderer is not None:
            self.renderer(radar)
        return result

    async def close(self) -> None:
        if self._owned_fetcher and isinstance(self.fetcher, HttpFetcher):
            await self.fetcher.close()

    async def __aenter__(self) -> RadarPipeline:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
