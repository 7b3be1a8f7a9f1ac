from __future__ import annotations

from collections.abc import Iterable

from radar_ingest.exceptions import ExceptionMessages, MalformedDataError

__all__ = [
    "ContentValidator",
    "REQUIRED_HEADERS",
]

REQUIRED_HEADERS = ("name", "ring", "quadrant", "isNew", "description")


class ContentValidator:
    """Structural check of a ColumnSet, run once per load before any row is sanitized.

    Column names are trimmed; non-string headers (e.g. empty sheet cells)
    are stringified.
    """

    def __init__(self, column_names: Iterable[object]) -> None:
        self.column_names = [str(c).strip() for c in column_names]

    def verify_content(self) -> None:
        if not self.column_names:
            raise MalformedDataError(ExceptionMessages.MISSING_CONTENT)

    def verify_headers(self) -> None:
        missing = [h for h in REQUIRED_HEADERS if h not in self.column_names]
        if missing:
            raise MalformedDataError(ExceptionMessages.MISSING_HEADERS)

    def verify(self) -> None:
        self.verify_content()
        self.verify_headers()
