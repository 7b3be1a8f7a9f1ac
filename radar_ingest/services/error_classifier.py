from __future__ import annotations

import logging
from typing import Any

from radar_ingest.exceptions import (
    ExceptionMessages,
    InvalidConfigError,
    InvalidContentError,
    MalformedDataError,
    SheetNotFoundError,
    SourceFileNotFoundError,
    UnauthorizedError,
)
from radar_ingest.models.classified_error import ClassifiedError, ErrorKind
from radar_ingest.models.source import SourceKind
from radar_ingest.sources.fetcher import FetchError

"""ErrorClassifier: raw failure -> ClassifiedError.

Detection only; user-facing copy is rendered from the classified value in
services/messages.py. classify_error() never raises.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "classify_error",
]

# Checked in order; first isinstance match wins.
_EXCEPTION_KINDS: list[tuple[type[BaseException], ErrorKind]] = [
    (InvalidConfigError, ErrorKind.INVALID_CONFIG),
    (UnauthorizedError, ErrorKind.UNAUTHORIZED),
    (MalformedDataError, ErrorKind.MALFORMED_DATA),
    (InvalidContentError, ErrorKind.INVALID_CONTENT),
    (SourceFileNotFoundError, ErrorKind.FILE_NOT_FOUND),
    (SheetNotFoundError, ErrorKind.SHEET_NOT_FOUND),
]

_DEFAULT_MESSAGES = {
    ErrorKind.INVALID_CONFIG: ExceptionMessages.INVALID_CONFIG,
    ErrorKind.UNAUTHORIZED: ExceptionMessages.UNAUTHORIZED,
    ErrorKind.SHEET_NOT_FOUND: ExceptionMessages.SHEET_NOT_FOUND,
}


def _fallback_kind(source_kind: SourceKind | None) -> ErrorKind:
    if source_kind is SourceKind.SHEET:
        return ErrorKind.SHEET_NOT_FOUND
    return ErrorKind.INVALID_CONTENT


def _kind_for(error: BaseException, source_kind: SourceKind | None) -> ErrorKind:
    for exc_type, kind in _EXCEPTION_KINDS:
        if isinstance(error, exc_type):
            return kind
    if isinstance(error, FetchError):
        return ErrorKind.SHEET_NOT_FOUND if source_kind is SourceKind.SHEET else ErrorKind.FILE_NOT_FOUND
    return _fallback_kind(source_kind)


def _details(error: BaseException) -> dict[str, Any]:
    details: dict[str, Any] = {}
    if isinstance(error, InvalidContentError):
        details["headers"] = list(error.headers)
        details["sample_rows"] = list(error.sample_rows)
    status = getattr(error, "status", None)
    if isinstance(status, int):
        details["status"] = status
    cause = error.__cause__
    if isinstance(cause, FetchError):
        details["cause"] = str(cause)
    return details


def classify_error(error: BaseException, source_kind: SourceKind | None) -> ClassifiedError:
    try:
        kind = _kind_for(error, source_kind)
        message = str(error) or _DEFAULT_MESSAGES.get(kind, kind.value)
        return ClassifiedError(kind=kind, message=message, source_kind=source_kind, details=_details(error))
    except Exception as e:  # classification must not fail the caller
        logger.debug(f"error classification failed: {e}")
        kind = _fallback_kind(source_kind)
        return ClassifiedError(kind=kind, message=kind.value, source_kind=source_kind)
