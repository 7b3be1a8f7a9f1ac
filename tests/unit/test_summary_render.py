from __future__ import annotations

from radar_ingest.models.blip_record import CanonicalBlipRecord
from radar_ingest.models.classified_error import ClassifiedError, ErrorKind
from radar_ingest.models.load_result import LoadPhase, LoadResult
from radar_ingest.models.radar import Blip, Quadrant, Radar, Ring
from radar_ingest.models.radar_metadata import RadarMetadata
from radar_ingest.models.source import SourceKind
from radar_ingest.services.summary import render_summary_line


def test_summary_awaiting_input():
    line = render_summary_line(LoadResult(phase=LoadPhase.AWAITING_INPUT, title="Acme Tech Radar"))
    assert line == (
        'SUMMARY phase=awaitingInput source=- title="Acme Tech Radar" '
        "blips=0 rings=0 quadrants=0 alternatives=0"
    )


def test_summary_ready_radar():
    adopt = Ring("Adopt", 0)
    radar = Radar(
        title="Acme Radar",
        rings=[adopt, Ring("Hold", 1)],
        quadrants=[Quadrant("Tools", [Blip("a", adopt, False, "", "", ""), Blip("b", adopt, True, "", "", "")])],
        alternatives=["Q2"],
    )
    record = CanonicalBlipRecord("a", "Adopt", False, "", "Tools", "", "")
    result = LoadResult.ready(SourceKind.SHEET, [record], RadarMetadata("Acme Radar", "Q1", ["Q2"]))
    result.radar = radar
    assert render_summary_line(result) == (
        'SUMMARY phase=ready source=sheet title="Acme Radar" blips=2 rings=2 quadrants=1 alternatives=1'
    )


def test_summary_failed_has_error_kind():
    error = ClassifiedError(ErrorKind.UNAUTHORIZED, "UNAUTHORIZED", SourceKind.SHEET)
    line = render_summary_line(LoadResult.failed(error))
    assert line.startswith("SUMMARY phase=unauthorized source=sheet")
    assert line.endswith("error=Unauthorized")
