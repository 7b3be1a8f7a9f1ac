from __future__ import annotations

import logging
from collections.abc import Sequence

from radar_ingest.models.blip_record import CanonicalBlipRecord
from radar_ingest.models.radar import Blip, Quadrant, Radar, Ring
from radar_ingest.models.radar_metadata import RadarMetadata
from radar_ingest.sources.resolver import strip_extension

from .policies import AssemblyPolicy

logger = logging.getLogger(__name__)

__all__ = [
    "RadarAssembler",
    "assemble_radar",
]


class RadarAssembler:
    """Builds the Radar domain model from sanitized records.

    The policy decides which rings/quadrants exist and what happens to
    records that do not fit them.
    """

    def __init__(self, policy: AssemblyPolicy) -> None:
        self.policy = policy

    def assemble(
        self,
        records: Sequence[CanonicalBlipRecord],
        ring_table: dict[str, Ring],
        quadrant_table: dict[str, Quadrant],
        metadata: RadarMetadata,
    ) -> Radar:
        radar = Radar(title=strip_extension(metadata.title))
        radar.add_rings(list(ring_table.values()))

        dropped = 0
        for record in records:
            resolved = self.policy.resolve(record, ring_table, quadrant_table)
            if resolved is None:
                dropped += 1
                continue
            ring, quadrant = resolved
            quadrant.add(
                Blip(
                    name=record.name,
                    ring=ring,
                    is_new=record.is_new,
                    status=record.status,
                    topic=record.topic,
                    description=record.description,
                )
            )

        for quadrant in quadrant_table.values():
            radar.add_quadrant(quadrant)
        for sheet_name in metadata.alternative_sheets:
            radar.add_alternative(sheet_name)
        radar.set_current_sheet(metadata.current_sheet)

        if dropped:
            logger.info(f"{dropped} blip(s) skipped: ring or quadrant not in the configured tables")
        return radar


def assemble_radar(
    records: Sequence[CanonicalBlipRecord], metadata: RadarMetadata, policy: AssemblyPolicy
) -> Radar:
    """Entry point: tables from the policy, then assembly."""
    ring_table = policy.ring_table(records)
    quadrant_table = policy.quadrant_table(records)
    return RadarAssembler(policy).assemble(records, ring_table, quadrant_table, metadata)
