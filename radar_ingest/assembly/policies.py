from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence

from radar_ingest.config.loader import GraphConfig
from radar_ingest.exceptions import ExceptionMessages, MalformedDataError
from radar_ingest.models.blip_record import CanonicalBlipRecord
from radar_ingest.models.radar import Quadrant, Ring

"""Ring / quadrant selection policies.

Two policies exist side by side and disagree on bad data:

- LegacyAssemblyPolicy derives both tables from the data (first-seen order)
  and raises MalformedDataError on a 5th ring.
- FixedTableAssemblyPolicy takes both tables from configuration and
  silently drops blips whose ring or quadrant does not match.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "AssemblyPolicy",
    "LegacyAssemblyPolicy",
    "FixedTableAssemblyPolicy",
    "normalize_label",
    "select_policy",
    "MAX_RINGS",
]

MAX_RINGS = 4

_CONJUNCTION_RE = re.compile(r"(-|\s+)(and)(-|\s+)|\s*(&)\s*")


def normalize_label(label: str) -> str:
    """Lowercase and fold "and" / "&" conjunctions (with spaces or hyphens) to " & "."""
    return _CONJUNCTION_RE.sub(" & ", label.lower()).strip()


def _capitalize_first(name: str) -> str:
    return name[:1].upper() + name[1:]


class AssemblyPolicy(ABC):
    name: str

    @abstractmethod
    def ring_table(self, records: Sequence[CanonicalBlipRecord]) -> dict[str, Ring]:
        ...

    @abstractmethod
    def quadrant_table(self, records: Sequence[CanonicalBlipRecord]) -> dict[str, Quadrant]:
        ...

    @abstractmethod
    def resolve(
        self,
        record: CanonicalBlipRecord,
        ring_table: dict[str, Ring],
        quadrant_table: dict[str, Quadrant],
    ) -> tuple[Ring, Quadrant] | None:
        """Ring and quadrant for one record, or None to drop it."""


class LegacyAssemblyPolicy(AssemblyPolicy):
    name = "legacy"

    def ring_table(self, records: Sequence[CanonicalBlipRecord]) -> dict[str, Ring]:
        table: dict[str, Ring] = {}
        for record in records:
            if record.ring in table:
                continue
            if len(table) == MAX_RINGS:
                raise MalformedDataError(ExceptionMessages.TOO_MANY_RINGS)
            table[record.ring] = Ring(record.ring, len(table))
        return table

    def quadrant_table(self, records: Sequence[CanonicalBlipRecord]) -> dict[str, Quadrant]:
        table: dict[str, Quadrant] = {}
        for record in records:
            if record.quadrant not in table:
                table[record.quadrant] = Quadrant(_capitalize_first(record.quadrant))
        return table

    def resolve(self, record, ring_table, quadrant_table):
        return ring_table[record.ring], quadrant_table[record.quadrant]


class FixedTableAssemblyPolicy(AssemblyPolicy):
    name = "fixed"

    def __init__(self, rings: Sequence[str], quadrants: Sequence[str]) -> None:
        self.rings = list(rings)
        self.quadrants = list(quadrants)

    def ring_table(self, records: Sequence[CanonicalBlipRecord]) -> dict[str, Ring]:
        return {name: Ring(name, i) for i, name in enumerate(self.rings)}

    def quadrant_table(self, records: Sequence[CanonicalBlipRecord]) -> dict[str, Quadrant]:
        return {name: Quadrant(name) for name in self.quadrants}

    @staticmethod
    def _match(label: str, names: Sequence[str]) -> str | None:
        wanted = normalize_label(label)
        for name in names:
            if normalize_label(name) == wanted:
                return name
        return None

    def resolve(self, record, ring_table, quadrant_table):
        quadrant_name = self._match(record.quadrant, list(quadrant_table))
        ring_name = self._match(record.ring, list(ring_table))
        if quadrant_name is None or ring_name is None:
            logger.debug(f"dropping blip {record.name!r}: ring={record.ring!r} quadrant={record.quadrant!r}")
            return None
        return ring_table[ring_name], quadrant_table[quadrant_name]


def select_policy(graph: GraphConfig) -> AssemblyPolicy:
    if graph.fixed_tables_enabled:
        return FixedTableAssemblyPolicy(graph.rings, graph.quadrants)
    return LegacyAssemblyPolicy()
