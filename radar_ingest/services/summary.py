from __future__ import annotations

from radar_ingest.models.load_result import LoadResult

"""SUMMARY line rendering for the CLI.

Format:
SUMMARY phase={phase} source={csv|json|sheet|-} title="{title}" blips={n}
rings={n} quadrants={n} alternatives={n} [error={kind}]
"""


def render_summary_line(result: LoadResult) -> str:
    """Render a SUMMARY line from a LoadResult.

    Examples:
        >>> from radar_ingest.models.load_result import LoadPhase
        >>> render_summary_line(LoadResult(phase=LoadPhase.AWAITING_INPUT, title="Company Tech Radar"))
        'SUMMARY phase=awaitingInput source=- title="Company Tech Radar" blips=0 rings=0 quadrants=0 alternatives=0'
    """
    radar = result.radar
    if radar is not None:
        title = radar.title
    elif result.metadata is not None:
        title = result.metadata.title
    else:
        title = result.title or ""

    parts = [
        f"SUMMARY phase={result.phase.value}",
        f"source={result.source_kind.value if result.source_kind else '-'}",
        f'title="{title}"',
        f"blips={len(radar.blips) if radar else len(result.records)}",
        f"rings={len(radar.rings) if radar else 0}",
        f"quadrants={len(radar.quadrants) if radar else 0}",
        f"alternatives={len(radar.alternatives) if radar else 0}",
    ]
    if result.error is not None:
        parts.append(f"error={result.error.kind.value}")
    return " ".join(parts)
