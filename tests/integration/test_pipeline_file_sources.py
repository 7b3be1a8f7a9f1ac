from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from radar_ingest.config.loader import GraphConfig
from radar_ingest.models.classified_error import ErrorKind
from radar_ingest.models.load_result import LoadPhase
from radar_ingest.models.source import SourceKind
from radar_ingest.services.pipeline import RadarPipeline
from radar_ingest.services.progress import LoadingIndicator
from radar_ingest.sources.resolver import locator_for

CSV_URL = "https://x.example/radars/Acme+Radar.csv"
JSON_URL = "https://x.example/radars/radar.json"


class _GatedFetcher:
    """Holds every fetch until the test opens the gate."""

    def __init__(self, inner) -> None:
        self.inner = inner
        self.entered = asyncio.Event()
        self.gate = asyncio.Event()

    async def fetch(self, url, *, params=None, headers=None):
        self.entered.set()
        await self.gate.wait()
        return await self.inner.fetch(url, params=params, headers=headers)


def _pipeline(config, fetcher, **kwargs) -> RadarPipeline:
    return RadarPipeline(config, fetcher=fetcher, indicator_factory=lambda: LoadingIndicator(enabled=False), **kwargs)


@pytest.mark.asyncio
async def test_csv_end_to_end_renders_radar(default_config, fake_fetcher, sample_csv):
    fake_fetcher.add(CSV_URL, (200, sample_csv))
    rendered = []
    pipeline = _pipeline(default_config, fake_fetcher, renderer=rendered.append)

    result = await pipeline.load(locator_for(CSV_URL))

    assert result.phase is LoadPhase.READY
    assert rendered == [result.radar]
    radar = result.radar
    assert radar.title == "Acme Radar"
    assert radar.current_sheet == "CSV File"
    assert [q.name for q in radar.quadrants] == default_config.graph.quadrants
    assert {b.name for b in radar.blips} == {"Kotlin", "Terraform", "Pair programming", "Kubernetes"}
    assert pipeline.current_result is result


@pytest.mark.asyncio
async def test_json_end_to_end(default_config, fake_fetcher):
    fake_fetcher.add(JSON_URL, (200, [
        {"name": "Rust", "ring": "Assess", "quadrant": "languages and frameworks", "isNew": "true",
         "description": "<b>fast</b><script>x()</script>"},
    ]))
    result = await _pipeline(default_config, fake_fetcher).load(locator_for(JSON_URL))

    assert result.phase is LoadPhase.READY
    blip = result.radar.blips[0]
    assert blip.description == "<b>fast</b>"
    assert blip.ring.name == "Assess"
    assert result.radar.quadrants[3].blips == [blip]


@pytest.mark.asyncio
async def test_csv_not_found(default_config, fake_fetcher):
    rendered = []
    result = await _pipeline(default_config, fake_fetcher, renderer=rendered.append).load(locator_for(CSV_URL))

    assert result.phase is LoadPhase.FAILED
    assert result.error.kind is ErrorKind.FILE_NOT_FOUND
    assert result.error.source_kind is SourceKind.CSV
    assert rendered == []


@pytest.mark.asyncio
async def test_legacy_policy_fifth_ring_fails_csv(default_config, fake_fetcher, csv_factory):
    cfg = replace(default_config, graph=GraphConfig(fixed_tables_enabled=False))
    fake_fetcher.add(CSV_URL, (200, csv_factory(
        "a,Adopt,Tools,true,d", "b,Trial,Tools,true,d", "c,Assess,Tools,true,d",
        "d,Hold,Tools,true,d", "e,Retire,Tools,true,d",
    )))
    result = await _pipeline(cfg, fake_fetcher).load(locator_for(CSV_URL))

    assert result.phase is LoadPhase.FAILED
    assert result.error.kind is ErrorKind.MALFORMED_DATA
    assert result.error.source_kind is SourceKind.CSV


@pytest.mark.asyncio
async def test_fixed_policy_drops_unknown_ring(default_config, fake_fetcher, csv_factory):
    fake_fetcher.add(CSV_URL, (200, csv_factory("a,Adopt,Tools,true,d", "e,Retire,Tools,true,d")))
    result = await _pipeline(default_config, fake_fetcher).load(locator_for(CSV_URL))
    assert result.phase is LoadPhase.READY
    assert [b.name for b in result.radar.blips] == ["a"]


@pytest.mark.asyncio
async def test_no_source_awaits_input_with_default_title(default_config, fake_fetcher):
    result = await _pipeline(default_config, fake_fetcher).load("")
    assert result.phase is LoadPhase.AWAITING_INPUT
    assert result.title == "Company Tech Radar"
    assert fake_fetcher.calls == []


@pytest.mark.asyncio
async def test_invalid_config_disables_input(default_config, fake_fetcher, sample_csv):
    cfg = replace(default_config, graph=GraphConfig(quadrants=["Only", "Three", "Here"]))
    fake_fetcher.add(CSV_URL, (200, sample_csv))
    pipeline = _pipeline(cfg, fake_fetcher)

    first = await pipeline.load(locator_for(CSV_URL))
    second = await pipeline.load(locator_for(CSV_URL))

    assert first.error.kind is ErrorKind.INVALID_CONFIG
    assert first.error.source_kind is None
    assert pipeline.input_enabled is False
    assert second is first
    assert fake_fetcher.calls == []


@pytest.mark.asyncio
async def test_invalid_config_ignored_by_legacy_policy(default_config, fake_fetcher, sample_csv):
    cfg = replace(default_config, graph=GraphConfig(quadrants=[], fixed_tables_enabled=False))
    fake_fetcher.add(CSV_URL, (200, sample_csv))
    result = await _pipeline(cfg, fake_fetcher).load(locator_for(CSV_URL))
    assert result.phase is LoadPhase.READY


@pytest.mark.asyncio
async def test_last_completed_load_wins(default_config, fake_fetcher, sample_csv):
    fake_fetcher.add(CSV_URL, (200, sample_csv))
    pipeline = _pipeline(default_config, fake_fetcher)

    await pipeline.load(locator_for(JSON_URL))
    assert pipeline.current_result.phase is LoadPhase.FAILED
    ok = await pipeline.load(locator_for(CSV_URL))
    assert pipeline.current_result is ok


@pytest.mark.asyncio
async def test_close_leaves_injected_fetcher(default_config, fake_fetcher):
    async with _pipeline(default_config, fake_fetcher) as pipeline:
        assert pipeline.fetcher is fake_fetcher


@pytest.mark.asyncio
async def test_phase_is_loading_while_fetch_in_flight(default_config, fake_fetcher, sample_csv):
    fake_fetcher.add(CSV_URL, (200, sample_csv))
    fetcher = _GatedFetcher(fake_fetcher)
    pipeline = _pipeline(default_config, fetcher)

    task = asyncio.create_task(pipeline.load(locator_for(CSV_URL)))
    await asyncio.wait_for(fetcher.entered.wait(), timeout=5)

    assert pipeline.current_result.phase is LoadPhase.LOADING
    assert pipeline.current_result.source_kind is SourceKind.CSV
    assert pipeline.current_result.error is None

    fetcher.gate.set()
    result = await task

    assert result.phase is LoadPhase.READY
    assert pipeline.current_result is result
