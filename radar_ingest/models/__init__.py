"""Domain models for the radar ingestion pipeline.

Records, metadata and results flow loader → assembler → renderer; the
radar model is what the renderer draws.
"""

from .blip_record import CanonicalBlipRecord
from .classified_error import ClassifiedError, ErrorKind
from .load_result import LoadPhase, LoadResult
from .radar import Blip, Quadrant, Radar, Ring
from .radar_metadata import CSV_SHEET_LABEL, JSON_SHEET_LABEL, RadarMetadata
from .source import SourceDescriptor, SourceKind, SourceType

__all__ = [
    # Records / metadata
    "CanonicalBlipRecord",
    "RadarMetadata",
    "CSV_SHEET_LABEL",
    "JSON_SHEET_LABEL",
    # Sources
    "SourceDescriptor",
    "SourceKind",
    "SourceType",
    # Results / errors
    "ClassifiedError",
    "ErrorKind",
    "LoadPhase",
    "LoadResult",
    # Radar model
    "Blip",
    "Quadrant",
    "Radar",
    "Ring",
]
