from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .source import SourceKind

"""ClassifiedError model.

Structured, language-agnostic description of a load failure. The
presentation layer turns it into user-facing copy (services/messages.py);
the CLI also appends it to the JSON Lines error log.
"""

__all__ = [
    "ErrorKind",
    "ClassifiedError",
]


class ErrorKind(Enum):
    """Closed error taxonomy.

    - FILE_NOT_FOUND: CSV/JSON source unreachable or 404
    - INVALID_CONTENT: column set fails structural validation
    - MALFORMED_DATA: row-level or ring/quadrant cardinality violation
    - SHEET_NOT_FOUND: sheet lookup failed for non-authorization reasons
    - UNAUTHORIZED: 403 after interactive consent was already attempted
    - INVALID_CONFIG: active configuration is internally inconsistent
    """
    FILE_NOT_FOUND = "FileNotFound"
    INVALID_CONTENT = "InvalidContent"
    MALFORMED_DATA = "MalformedData"
    SHEET_NOT_FOUND = "SheetNotFound"
    UNAUTHORIZED = "Unauthorized"
    INVALID_CONFIG = "InvalidConfig"


@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    message: str
    source_kind: SourceKind | None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def recoverable_in_place(self) -> bool:
        """Only UNAUTHORIZED can be fixed without a new locator (switch account)."""
        return self.kind is ErrorKind.UNAUTHORIZED

    def to_json_line(self) -> str:
        """Serialize as one JSON Lines record with a UTC timestamp."""
        payload = asdict(self)
        payload["kind"] = self.kind.value
        payload["source_kind"] = self.source_kind.value if self.source_kind else None
        payload["timestamp"] = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return json.dumps(payload, ensure_ascii=False, default=str)
