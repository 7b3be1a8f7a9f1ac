from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AuthSession",
]


@dataclass
class AuthSession:
    """Authorization state that outlives a single load (one per page session).

    Owned by the pipeline and handed by reference to every SheetLoader; only
    AuthFlow mutates it. No locking: everything runs on one event loop.
    """
    consent_attempted: bool = False  # interactive consent already initiated
    access_token: str | None = None
    email: str | None = None  # account that granted the current token

    def reset(self) -> None:
        self.consent_attempted = False
        self.access_token = None
        self.email = None
