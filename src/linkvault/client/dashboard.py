"""Link dashboard view-model.

Owns the list of links a user is looking at and the inline error text.
The session and API client are injected; nothing reaches for globals.

Deletes are optimistic: the link disappears immediately, and if the
server refuses, the previous list comes back and the error is shown.
A failed delete never blocks the next action.
"""

from enum import Enum
from typing import Optional

import httpx
import structlog

from linkvault.client.api import ApiClient, ApiError
from linkvault.client.session import SessionStore
from linkvault.schemas.link import LinkRead

logger = structlog.get_logger()

NOT_LOGGED_IN = "You must be logged in to create a link."
NETWORK_ERROR = "Could not reach the server."


class DashboardStatus(str, Enum):
    WAITING = "waiting"  # session bootstrap not finished
    SIGNED_OUT = "signed_out"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


def _error_message(exc: Exception) -> str:
    if isinstance(exc, ApiError):
        return exc.message
    return NETWORK_ERROR


class LinkDashboard:
    def __init__(self, session: SessionStore, api: ApiClient):
        self.session = session
        self.api = api
        self.links: list[LinkRead] = []
        self.error: Optional[str] = None
        self.status = DashboardStatus.WAITING

    async def refresh(self) -> DashboardStatus:
        """Load the link list if, and only if, the session allows it."""
        if not self.session.bootstrapped:
            self.status = DashboardStatus.WAITING
            return self.status

        if not self.session.token:
            self.links = []
            self.status = DashboardStatus.SIGNED_OUT
            return self.status

        self.status = DashboardStatus.LOADING
        try:
            self.links = await self.api.list_links()
        except (ApiError, httpx.TransportError) as e:
            self.error = _error_message(e)
            self.status = DashboardStatus.FAILED
            return self.status

        self.error = None
        self.status = DashboardStatus.READY
        return self.status

    def link_created(self, link: LinkRead) -> None:
        self.links = [link, *self.links]

    async def create_link(self, title: str, url: str) -> Optional[LinkRead]:
        """Create a link and put it at the top. Returns None on failure."""
        self.error = None
        if not self.session.token:
            self.error = NOT_LOGGED_IN
            return None

        try:
            link = await self.api.create_link(title, url)
        except (ApiError, httpx.TransportError) as e:
            self.error = _error_message(e)
            return None

        self.link_created(link)
        return link

    async def delete_link(self, link_id: str) -> bool:
        """Optimistically remove a link; restore the list if the server refuses."""
        if not self.session.token:
            return False

        snapshot = list(self.links)
        self.links = [link for link in self.links if str(link.id) != str(link_id)]

        try:
            await self.api.delete_link(str(link_id))
        except (ApiError, httpx.TransportError) as e:
            logger.info("dashboard.delete_reverted", link_id=str(link_id))
            self.links = snapshot
            self.error = _error_message(e)
            return False

        return True
