"""API client for the LinkVault backend.

Wraps httpx.AsyncClient with two behaviours:

- the session's token, when there is one, goes out as a bearer header
- a request that could not even connect (server asleep on a cold start)
  is retried exactly once after ``retry_backoff`` seconds. Anything that
  got an HTTP status back, 4xx or 5xx, is never retried.

HTTP errors surface as ApiError carrying the server's ``error`` message
when it sent one. Transport errors from the retry propagate unchanged.
"""

import asyncio
from typing import Any, Optional

import httpx
import structlog

from linkvault.client.session import SessionStore
from linkvault.schemas.link import LinkRead

logger = structlog.get_logger()

DEFAULT_BASE_URL = "http://localhost:3001"
RETRYABLE_ERRORS = (httpx.ConnectError, httpx.ConnectTimeout)
RETRIED = "linkvault.retried"


class ApiError(Exception):
    """A request that got an HTTP error status back."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        message = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            message = body["error"]
        return cls(
            response.status_code,
            message or f"Request failed with status {response.status_code}",
        )


class ApiClient:
    """Async client for the /api endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        session: Optional[SessionStore] = None,
        *,
        retry_on_connect_error: bool = True,
        retry_backoff: float = 2.0,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self.retry_on_connect_error = retry_on_connect_error
        self.retry_backoff = retry_backoff
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    # ─── Transport ───────────────────────────────────────

    def _headers(self, extra: Optional[dict[str, str]]) -> dict[str, str]:
        headers = dict(extra or {})
        token = self.session.token if self.session else None
        if token:
            headers.setdefault("Authorization", f"Bearer {token}")
        return headers

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request; raise ApiError on HTTP error statuses."""
        headers = self._headers(kwargs.pop("headers", None))
        request = self._http.build_request(method, url, headers=headers, **kwargs)

        try:
            response = await self._http.send(request)
        except RETRYABLE_ERRORS as e:
            if not self.retry_on_connect_error or request.extensions.get(RETRIED):
                raise
            request.extensions[RETRIED] = True
            logger.warning(
                "api_client.retrying",
                method=method,
                url=url,
                error=str(e),
                backoff=self.retry_backoff,
            )
            await asyncio.sleep(self.retry_backoff)
            response = await self._http.send(request)

        if response.is_error:
            raise ApiError.from_response(response)
        return response

    # ─── Endpoints ───────────────────────────────────────

    async def health(self) -> dict:
        return (await self.request("GET", "/api/health")).json()

    async def register(self, email: str, password: str) -> dict:
        """Create an account; returns the non-secret user fields."""
        r = await self.request(
            "POST", "/api/users", json={"email": email, "password": password}
        )
        return r.json()["user"]

    async def login(self, email: str, password: str) -> str:
        """Exchange credentials for a bearer token."""
        r = await self.request(
            "POST", "/api/auth/login", json={"email": email, "password": password}
        )
        return r.json()["token"]

    async def profile(self) -> dict:
        return (await self.request("GET", "/api/profile")).json()["user"]

    async def list_links(self) -> list[LinkRead]:
        r = await self.request("GET", "/api/links")
        return [LinkRead.model_validate(item) for item in r.json()]

    async def create_link(self, title: str, url: str) -> LinkRead:
        r = await self.request("POST", "/api/links", json={"title": title, "url": url})
        return LinkRead.model_validate(r.json())

    async def delete_link(self, link_id: str) -> str:
        r = await self.request("DELETE", f"/api/links/{link_id}")
        return r.json()["message"]
