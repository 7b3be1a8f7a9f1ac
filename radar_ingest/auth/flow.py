from __future__ import annotations

import logging
from enum import Enum

from .consent import ConsentProvider
from .session import AuthSession

"""Silent-then-interactive authorization for private Google Sheets.

States:

    UNATTEMPTED -> SILENT_ATTEMPT -> PUBLIC_OK
                                  -> PRIVATE_DETECTED -> INTERACTIVE_CONSENT -> AUTHORIZED
                                                                             -> DENIED

A 403 escalates to interactive consent only once per AuthSession. A 403
after consent was already attempted is terminal (DENIED); recovery is the
switch-account action, i.e. begin(force=True), which goes straight to
INTERACTIVE_CONSENT whatever the session history says.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "AuthState",
    "AuthFlow",
]


class AuthState(Enum):
    UNATTEMPTED = "unattempted"
    SILENT_ATTEMPT = "silentAttempt"
    PUBLIC_OK = "publicOk"
    PRIVATE_DETECTED = "privateDetected"
    INTERACTIVE_CONSENT = "interactiveConsent"
    AUTHORIZED = "authorized"
    DENIED = "denied"


class AuthFlow:
    def __init__(self, session: AuthSession, provider: ConsentProvider | None = None) -> None:
        self.session = session
        self.provider = provider
        self.state = AuthState.UNATTEMPTED
        self._consented_this_attempt = False

    def _transition(self, state: AuthState) -> None:
        logger.debug(f"auth: {self.state.value} -> {state.value}")
        self.state = state

    async def begin(self, force: bool = False) -> str | None:
        """Start an authorization attempt and return the token to send (may be None).

        force=False: silent attempt with whatever token is available without
        prompting. force=True: interactive consent right away.
        """
        self._consented_this_attempt = False
        if force:
            return await self.request_consent(force_account_selection=True)

        self._transition(AuthState.SILENT_ATTEMPT)
        if self.session.access_token:
            return self.session.access_token
        if self.provider is None:
            return None
        token = await self.provider.acquire_token(interactive=False)
        if token:
            self.session.access_token = token
        return token

    def should_escalate(self) -> bool:
        """Decide what a 403 means for this attempt.

        True: first 403 of the session, consent should be requested.
        False: consent already happened (now or earlier), the 403 is final.
        """
        if self.session.consent_attempted or self._consented_this_attempt:
            self._transition(AuthState.DENIED)
            return False
        self._transition(AuthState.PRIVATE_DETECTED)
        return True

    async def request_consent(self, force_account_selection: bool = False) -> str | None:
        """Run the interactive step. Waits for the provider with no timeout."""
        self.session.consent_attempted = True
        self._consented_this_attempt = True
        self._transition(AuthState.INTERACTIVE_CONSENT)
        if self.provider is None:
            self._transition(AuthState.DENIED)
            return None

        token = await self.provider.acquire_token(
            interactive=True, force_account_selection=force_account_selection
        )
        if not token:
            self._transition(AuthState.DENIED)
            return None
        self.session.access_token = token
        self.session.email = self.provider.email
        return token

    def mark_success(self) -> None:
        self._transition(AuthState.AUTHORIZED if self._consented_this_attempt else AuthState.PUBLIC_OK)

    def mark_denied(self) -> None:
        self._transition(AuthState.DENIED)
