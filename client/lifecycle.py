"""Top-level session routing between the unauthenticated and authenticated views."""

from enum import Enum
from typing import Callable, Optional

from client.auth_api import AuthApi
from client.outcome import Ok, Outcome
from client.session_store import SessionStore
from client.signer import forget_loaded_keys
from client.token_validator import is_live
from common.exceptions import AuthExpired
from common.logging_config import get_logger

logger = get_logger(__name__)


class LifecycleState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class SessionLifecycleController:
    """
    Two-state router for the client session.

    Expiry is only checked on entry. Once authenticated, the state changes
    only on explicit logout.
    """

    def __init__(
        self,
        store: SessionStore,
        auth_api: AuthApi,
        validator: Callable[[Optional[str]], bool] = is_live,
    ):
        self.store = store
        self.auth_api = auth_api
        self.validator = validator
        self.state = LifecycleState.UNAUTHENTICATED

    @property
    def is_authenticated(self) -> bool:
        return self.state is LifecycleState.AUTHENTICATED

    def on_entry(self) -> LifecycleState:
        """Route on startup from the stored token."""
        session = self.store.get()
        if not session.has_token:
            logger.info("No stored session, routing to login")
            self.state = LifecycleState.UNAUTHENTICATED
        elif self.validator(session.bearer_token):
            logger.info("Stored session is live, routing to dashboard")
            self.state = LifecycleState.AUTHENTICATED
        else:
            logger.info("Stored session expired, routing to login")
            self.state = LifecycleState.UNAUTHENTICATED
        return self.state

    def require_authenticated(self) -> None:
        """
        Raises:
            AuthExpired: If the controller is not in the authenticated state
        """
        if not self.is_authenticated:
            raise AuthExpired("Not logged in")

    def route_to_login(self) -> LifecycleState:
        """Leave the authenticated view without touching stored credentials."""
        self.state = LifecycleState.UNAUTHENTICATED
        return self.state

    async def login(self, username: str, password: str) -> Outcome:
        """Log in; on success the session is written before the transition.

        Raises:
            OSError: If the session cannot be saved; the state is left unchanged
        """
        outcome = await self.auth_api.login(username, password)
        if isinstance(outcome, Ok):
            self.store.set(outcome.payload.token, outcome.payload.private_key)
            self.state = LifecycleState.AUTHENTICATED
            logger.info(f"Login successful for user: {username}")
        return outcome

    async def register(self, username: str, password: str) -> Outcome:
        """Register, then log in with the same credentials."""
        outcome = await self.auth_api.register(username, password)
        if not isinstance(outcome, Ok):
            return outcome
        logger.info(f"Registration successful for user: {username}")
        return await self.login(username, password)

    def logout(self) -> LifecycleState:
        """
        Clear the session unconditionally.

        Raises:
            OSError: If the stored session cannot be removed from disk; the
                in-memory session is cleared and the state changes anyway
        """
        try:
            self.store.clear()
        finally:
            forget_loaded_keys()
            self.state = LifecycleState.UNAUTHENTICATED
        return self.state
