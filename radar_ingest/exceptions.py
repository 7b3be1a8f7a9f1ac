from __future__ import annotations

"""Exception types raised inside the ingestion pipeline.

Loaders raise these; the pipeline catches them once at the loader boundary
and turns them into a ClassifiedError (see services/error_classifier.py).
"""

__all__ = [
    "ExceptionMessages",
    "RadarError",
    "MalformedDataError",
    "InvalidContentError",
    "SourceFileNotFoundError",
    "SheetNotFoundError",
    "UnauthorizedError",
    "InvalidConfigError",
]


class ExceptionMessages:
    TOO_MANY_QUADRANTS = (
        "There are more than 4 quadrant names listed in your data. "
        "Check the quadrant column for errors."
    )
    TOO_MANY_RINGS = "More than 4 rings."
    MISSING_HEADERS = (
        "Document is missing one or more required headers or they are misspelled. "
        'Check that your document contains headers for "name", "ring", "quadrant", '
        '"isNew", "description".'
    )
    MISSING_CONTENT = "Document is missing content."
    SHEET_NOT_FOUND = "Oops! We can't find the Google Sheet you've entered. Can you check the URL?"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CONFIG = "Unexpected number of quadrants or rings. Please check in the configuration."
    INVALID_JSON_CONTENT = "Invalid content of JSON file. Please check the content of file."
    INVALID_CSV_CONTENT = "Invalid content of CSV file. Please check the content of file."
    CSV_NOT_FOUND = "Oops! We can't find the CSV file you've entered"
    JSON_NOT_FOUND = "Oops! We can't find the JSON file you've entered"


class RadarError(Exception):
    """Base class for pipeline failures."""


class MalformedDataError(RadarError):
    """Row-level or structural violation (missing headers, too many rings)."""


class InvalidContentError(RadarError):
    """Column set of a CSV/JSON document failed structural validation.

    ``headers`` and ``sample_rows`` are kept for diagnostics.
    """

    def __init__(
        self,
        message: str,
        headers: list[str] | None = None,
        sample_rows: list[dict[str, object]] | None = None,
    ) -> None:
        super().__init__(message)
        self.headers = headers or []
        self.sample_rows = sample_rows or []


class SourceFileNotFoundError(RadarError):
    """CSV/JSON source unreachable or answered with a non-success status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class SheetNotFoundError(RadarError):
    pass


class UnauthorizedError(RadarError):
    """403 from the Sheets API after interactive consent was already attempted."""

    status = 403


class InvalidConfigError(RadarError):
    pass
