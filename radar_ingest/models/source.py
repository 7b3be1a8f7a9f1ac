from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Source descriptors produced by the SourceResolver."""

__all__ = [
    "SourceKind",
    "SourceType",
    "SourceDescriptor",
]


class SourceKind(Enum):
    """Tag used to pick user-facing copy for an error (csv | json | sheet)."""
    CSV = "csv"
    JSON = "json"
    SHEET = "sheet"


class SourceType(Enum):
    """Outcome of locator resolution.

    CONFIGURED_DEFAULT loads exactly like GOOGLE_SHEET; it only records that
    the sheet came from configuration rather than from the locator.
    """
    CSV = "csv"
    JSON = "json"
    GOOGLE_SHEET = "googleSheet"
    CONFIGURED_DEFAULT = "configuredDefault"
    NONE = "none"


@dataclass(frozen=True)
class SourceDescriptor:
    source_type: SourceType
    document_id: str | None = None  # fetch URL (csv/json) or sheet reference
    sheet_name: str | None = None  # tab selector, sheets only
    title: str | None = None  # configured default title

    @property
    def source_kind(self) -> SourceKind | None:
        if self.source_type is SourceType.CSV:
            return SourceKind.CSV
        if self.source_type is SourceType.JSON:
            return SourceKind.JSON
        if self.source_type in (SourceType.GOOGLE_SHEET, SourceType.CONFIGURED_DEFAULT):
            return SourceKind.SHEET
        return None
