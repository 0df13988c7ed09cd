"""
Authentication context for the console.

Two states: anonymous (no token) and authenticated (token + user). The state
is rebuilt from persisted storage on start, moved to authenticated by a
successful login, and back to anonymous by logout or by any 401 response.
Leaving the authenticated state sends the operator to the login entry point.
"""

from enum import Enum
from typing import Callable, List, Optional
import logging

from rag_admin_sdk import AsyncRagAdminClient, LoginRequest, Session, SessionEvent, User
from rag_admin_sdk.session import TOKEN_KEY, USER_KEY

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"

RedirectHandler = Callable[[str], None]


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class NotAuthenticatedError(Exception):
    """Raised when a protected view is entered without a session."""

    def __init__(self, message: str = "Authentication required", redirect_to: str = LOGIN_ROUTE):
        super().__init__(message)
        self.redirect_to = redirect_to


class AuthContext:
    """Process-wide session state with login/logout lifecycle."""

    def __init__(self, client: AsyncRagAdminClient, session: Optional[Session] = None):
        self.client = client
        self.session = session or client.session
        self.state = AuthState.ANONYMOUS
        self.user: Optional[User] = None
        self.ready = False
        self._redirect_handlers: List[RedirectHandler] = []
        self._unsubscribe = self.session.subscribe(self._on_session_event)

    @property
    def is_authenticated(self) -> bool:
        return self.state == AuthState.AUTHENTICATED

    @property
    def token(self) -> Optional[str]:
        return self.session.token

    def on_redirect(self, handler: RedirectHandler) -> None:
        """Register where "go to the login page" leads (CLI message, UI router...)."""
        self._redirect_handlers.append(handler)

    def initialize(self) -> AuthState:
        """Rebuild state from persisted storage."""
        token = self.session.token
        user = self.session.user
        if token and user is not None:
            self.state = AuthState.AUTHENTICATED
            self.user = user
        else:
            if token or self.session.storage.get_item(USER_KEY):
                # Half-written or undecodable session
                logger.info("Discarding incomplete persisted session")
                self.session.storage.remove_item(TOKEN_KEY)
                self.session.storage.remove_item(USER_KEY)
            self.state = AuthState.ANONYMOUS
            self.user = None
        self.ready = True
        return self.state

    async def login(self, email: str, password: str) -> User:
        """Authenticate against the backend and persist the session.

        Raises the client's exception when the backend refuses.
        """
        response = await self.client.login(LoginRequest(email=email, password=password))
        self.session.store(response.token, response.user)
        self.state = AuthState.AUTHENTICATED
        self.user = response.user
        self.ready = True
        logger.info(f"Logged in as {response.user.email}")
        return response.user

    def logout(self) -> None:
        self.session.clear()

    def require_authenticated(self) -> User:
        """Route guard for protected views.

        Completes initialization first so a protected view never runs before
        the persisted session has been checked.
        """
        if not self.ready:
            self.initialize()
        if not self.is_authenticated or self.user is None:
            self._redirect()
            raise NotAuthenticatedError()
        return self.user

    def close(self) -> None:
        self._unsubscribe()

    def _on_session_event(self, event: SessionEvent) -> None:
        if event == SessionEvent.LOGGED_IN:
            return
        was_authenticated = self.is_authenticated
        self.state = AuthState.ANONYMOUS
        self.user = None
        if event == SessionEvent.EXPIRED:
            logger.warning("Session rejected by the backend, redirecting to login")
            self._redirect()
        elif was_authenticated:
            self._redirect()

    def _redirect(self) -> None:
        for handler in list(self._redirect_handlers):
            handler(LOGIN_ROUTE)
