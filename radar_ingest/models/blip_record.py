from __future__ import annotations

from dataclasses import dataclass

"""CanonicalBlipRecord model.

The normalized output of RowSanitizer. One record per data row, created
fresh on every load and discarded once the radar has been assembled.
"""

__all__ = [
    "CanonicalBlipRecord",
]


@dataclass(frozen=True)
class CanonicalBlipRecord:
    """Sanitized blip row.

    ``ring`` and ``quadrant`` are still raw labels; they are resolved against
    the ring / quadrant tables by the assembler.
    """
    name: str
    ring: str  # raw ring label
    is_new: bool
    status: str
    quadrant: str  # raw quadrant label
    topic: str
    description: str

    def as_row(self) -> dict[str, str]:
        """Return the record as a RawRow (sanitizing it yields an equal record)."""
        return {
            "name": self.name,
            "ring": self.ring,
            "quadrant": self.quadrant,
            "isNew": "true" if self.is_new else "false",
            "status": self.status,
            "topic": self.topic,
            "description": self.description,
        }
