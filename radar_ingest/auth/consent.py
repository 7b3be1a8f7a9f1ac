from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod

"""Consent provider interface.

The OAuth/identity library is an external collaborator; AuthFlow only sees
this interface. A browser front end would open the consent popup inside
acquire_token(interactive=True) and resolve once the user has finished.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "ConsentProvider",
    "EnvTokenConsentProvider",
]


class ConsentProvider(ABC):
    """Source of OAuth access tokens for the Sheets API."""

    @abstractmethod
    async def acquire_token(self, interactive: bool, force_account_selection: bool = False) -> str | None:
        """Return an access token, or None when none is available / consent was refused.

        interactive=False must never prompt the user. force_account_selection
        asks the identity provider to show the account chooser again
        (switch account).
        """

    @property
    def email(self) -> str | None:
        """Account that granted the last token, when known."""
        return None


class EnvTokenConsentProvider(ConsentProvider):
    """CLI provider: the "interactive" step reads a token from an environment variable.

    Silent attempts never yield a token, so a private sheet always goes
    through the consent branch of AuthFlow.
    """

    def __init__(self, variable: str = "GOOGLE_ACCESS_TOKEN", email_variable: str = "GOOGLE_ACCOUNT_EMAIL") -> None:
        self.variable = variable
        self.email_variable = email_variable

    async def acquire_token(self, interactive: bool, force_account_selection: bool = False) -> str | None:
        if not interactive:
            return None
        token = os.getenv(self.variable)
        if not token:
            logger.warning(f"interactive consent requested but {self.variable} is not set")
        return token or None

    @property
    def email(self) -> str | None:
        return os.getenv(self.email_variable)
