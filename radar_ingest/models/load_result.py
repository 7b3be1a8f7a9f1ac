from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from .blip_record import CanonicalBlipRecord
from .classified_error import ClassifiedError, ErrorKind
from .radar_metadata import RadarMetadata
from .source import SourceKind

if TYPE_CHECKING:
    from .radar import Radar

__all__ = [
    "LoadPhase",
    "LoadResult",
]


class LoadPhase(Enum):
    """Phase signal for the presentation layer.

    State transitions: loading → (ready | unauthorized | failed).
    AWAITING_INPUT: the locator named no source; the input form is shown.
    """
    AWAITING_INPUT = "awaitingInput"
    LOADING = "loading"
    READY = "ready"
    UNAUTHORIZED = "unauthorized"
    FAILED = "failed"


@dataclass
class LoadResult:
    phase: LoadPhase
    source_kind: SourceKind | None = None
    records: list[CanonicalBlipRecord] = field(default_factory=list)
    metadata: RadarMetadata | None = None
    error: ClassifiedError | None = None
    radar: Radar | None = None
    title: str | None = None  # page title when nothing was loaded

    @classmethod
    def ready(
        cls, source_kind: SourceKind, records: list[CanonicalBlipRecord], metadata: RadarMetadata
    ) -> LoadResult:
        return cls(phase=LoadPhase.READY, source_kind=source_kind, records=records, metadata=metadata)

    @classmethod
    def failed(cls, error: ClassifiedError) -> LoadResult:
        phase = LoadPhase.UNAUTHORIZED if error.kind is ErrorKind.UNAUTHORIZED else LoadPhase.FAILED
        return cls(phase=phase, source_kind=error.source_kind, error=error)

    @property
    def ok(self) -> bool:
        return self.phase is LoadPhase.READY and self.error is None
