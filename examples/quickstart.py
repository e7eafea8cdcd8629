"""
LinkVault quickstart.

Registers a throwaway user, logs in, saves a couple of links, lists them
and deletes one — all through linkvault.client, the same pieces the CLI
uses. Start the backend first:

    LINKVAULT_JWT_SECRET=dev-secret LINKVAULT_DATABASE_URL=sqlite+aiosqlite:///./linkvault.db \
    LINKVAULT_AUTO_CREATE_SCHEMA=true linkvault serve
"""

import asyncio
import sys
import uuid

import httpx

from linkvault.client import ApiClient, LinkDashboard, MemoryStorage, SessionStore
from linkvault.client.session import user_from_token

BASE = "http://localhost:3001"


async def main() -> None:
    session = SessionStore(MemoryStorage())
    session.bootstrap()

    async with ApiClient(BASE, session=session) as api:
        try:
            health = await api.health()
        except httpx.TransportError:
            print(f"ERROR: Backend not reachable at {BASE}")
            sys.exit(1)
        print(f"Backend: {health['status']} (database {health['database']})")

        email = f"demo-{uuid.uuid4().hex[:8]}@example.com"
        password = "demo-password-123"
        await api.register(email, password)
        token = await api.login(email, password)
        session.login(token, user_from_token(token, email))
        print(f"Logged in as {email}")

        dashboard = LinkDashboard(session, api)
        await dashboard.refresh()
        await dashboard.create_link("Python docs", "https://docs.python.org/3/")
        await dashboard.create_link("FastAPI", "https://fastapi.tiangolo.com/")

        print("\nYour links:")
        for link in dashboard.links:
            print(f"  {link.title:15s} {link.url}")

        first = dashboard.links[0]
        await dashboard.delete_link(str(first.id))
        print(f"\nDeleted {first.title}; {len(dashboard.links)} link(s) left.")


if __name__ == "__main__":
    asyncio.run(main())
