"""Client session store.

Holds the bearer token and cached user, mirrored into durable storage.
It is an explicit state machine::

    UNINITIALIZED → RESTORING → AUTHENTICATED | ANONYMOUS

Anything that fetches user data must check ``bootstrapped`` first.
"Bootstrap not finished" is a wait state, not "logged out": fetching
early would flash a logged-out view and send an unauthenticated request.

The cached user is only a copy of what the server said at login and can
go stale. Logout clears local state only; the server keeps honouring the
token until it expires.
"""

from enum import Enum
from typing import Callable, Optional

import jwt
import structlog
from pydantic import BaseModel

from linkvault.client.storage import ClientStorage

logger = structlog.get_logger()

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RESTORING = "restoring"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class SessionUser(BaseModel):
    id: str
    email: str


Listener = Callable[["SessionStore"], None]


def user_from_token(token: str, email: str) -> SessionUser:
    """Build the cached user from a freshly issued token.

    The signature is not checked here: the client has no secret, and the
    server verifies the token on every request anyway.
    """
    claims = jwt.decode(token, options={"verify_signature": False})
    return SessionUser(id=str(claims["userId"]), email=email)


class SessionStore:
    """Token + user, in memory and in durable storage."""

    def __init__(self, storage: ClientStorage):
        self.storage = storage
        self.state = SessionState.UNINITIALIZED
        self.token: Optional[str] = None
        self.user: Optional[SessionUser] = None
        self._listeners: list[Listener] = []

    @property
    def bootstrapped(self) -> bool:
        return self.state in (SessionState.AUTHENTICATED, SessionState.ANONYMOUS)

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store)`` after every state change. Returns an unsubscribe."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _transition(self, state: SessionState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(self)

    def bootstrap(self) -> SessionState:
        """Restore a persisted session, once.

        Anything short of a complete, parseable session is cleared from
        storage and the store ends up ANONYMOUS; this never raises for bad
        storage contents.
        """
        if self.state is not SessionState.UNINITIALIZED:
            return self.state

        self._transition(SessionState.RESTORING)
        try:
            token = self.storage.get_item(TOKEN_KEY)
            raw_user = self.storage.get_item(USER_KEY)
            if token and raw_user:
                self.user = SessionUser.model_validate_json(raw_user)
                self.token = token
        except (OSError, ValueError):
            logger.warning("session.restore_failed")
            self.token = None
            self.user = None

        if self.token and self.user:
            logger.debug("session.restored", user_id=self.user.id)
            self._transition(SessionState.AUTHENTICATED)
        else:
            self._clear_storage()
            self._transition(SessionState.ANONYMOUS)
        return self.state

    def _clear_storage(self) -> None:
        try:
            self.storage.remove_item(TOKEN_KEY)
            self.storage.remove_item(USER_KEY)
        except (OSError, ValueError):
            logger.warning("session.clear_failed")

    def login(self, token: str, user: SessionUser) -> None:
        self.token = token
        self.user = user
        self.storage.set_item(TOKEN_KEY, token)
        self.storage.set_item(USER_KEY, user.model_dump_json())
        self._transition(SessionState.AUTHENTICATED)

    def logout(self) -> None:
        self.token = None
        self.user = None
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_KEY)
        self._transition(SessionState.ANONYMOUS)
