from __future__ import annotations

from dataclasses import dataclass, field

from ..exceptions import ExceptionMessages, MalformedDataError

"""Radar domain model consumed by the rendering stage.

Ring / Quadrant / Blip / Radar mirror what the renderer draws. Rendering
itself lives outside this package.
"""

__all__ = [
    "Ring",
    "Blip",
    "Quadrant",
    "Radar",
    "MAX_QUADRANTS",
]

MAX_QUADRANTS = 4


@dataclass(frozen=True)
class Ring:
    name: str
    order: int


@dataclass(frozen=True)
class Blip:
    name: str
    ring: Ring
    is_new: bool
    status: str
    topic: str
    description: str


@dataclass
class Quadrant:
    name: str
    blips: list[Blip] = field(default_factory=list)

    def add(self, blip: Blip) -> None:
        self.blips.append(blip)


@dataclass
class Radar:
    title: str = ""
    rings: list[Ring] = field(default_factory=list)
    quadrants: list[Quadrant] = field(default_factory=list)
    alternatives: list[str] = field(default_factory=list)
    current_sheet: str | None = None

    def add_quadrant(self, quadrant: Quadrant) -> None:
        if len(self.quadrants) >= MAX_QUADRANTS:
            raise MalformedDataError(ExceptionMessages.TOO_MANY_QUADRANTS)
        self.quadrants.append(quadrant)

    def add_rings(self, rings: list[Ring]) -> None:
        self.rings.extend(rings)

    def add_alternative(self, sheet_name: str) -> None:
        self.alternatives.append(sheet_name)

    def set_current_sheet(self, sheet_name: str | None) -> None:
        self.current_sheet = sheet_name

    @property
    def blips(self) -> list[Blip]:
        return [b for q in self.quadrants for b in q.blips]
