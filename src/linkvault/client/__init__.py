"""Client side of LinkVault.

- ``storage``: durable key/value storage for the session (file or memory)
- ``session``: the session state machine (restore, login, logout)
- ``api``: httpx-based API client with bearer auth and cold-start retry
- ``dashboard``: link list view-model with optimistic updates

None of these import the server configuration, so the client runs
anywhere the server's secret is not available.
"""

from linkvault.client.api import ApiClient, ApiError
from linkvault.client.dashboard import DashboardStatus, LinkDashboard
from linkvault.client.session import SessionState, SessionStore, SessionUser
from linkvault.client.storage import ClientStorage, FileStorage, MemoryStorage

__all__ = [
    "ApiClient",
    "ApiError",
    "ClientStorage",
    "DashboardStatus",
    "FileStorage",
    "LinkDashboard",
    "MemoryStorage",
    "SessionState",
    "SessionStore",
    "SessionUser",
]
