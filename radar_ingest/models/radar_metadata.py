from __future__ import annotations

from dataclasses import dataclass, field

__all__ = [
    "RadarMetadata",
    "CSV_SHEET_LABEL",
    "JSON_SHEET_LABEL",
]

CSV_SHEET_LABEL = "CSV File"
JSON_SHEET_LABEL = "JSON File"


@dataclass(frozen=True)
class RadarMetadata:
    """Per-load radar metadata handed to the assembler together with the records."""
    title: str
    current_sheet: str
    alternative_sheets: list[str] = field(default_factory=list)
