"""LinkVault CLI — register, log in, and manage your links from a terminal.

Usage:
    linkvault register you@example.com          # Create an account (prompts for password)
    linkvault login you@example.com             # Log in and store the session
    linkvault whoami                             # Show the logged-in user
    linkvault links                              # List your links, newest first
    linkvault add "Docs" https://example.com     # Save a link
    linkvault rm <link-id>                       # Delete a link
    linkvault logout                             # Forget the stored session
    linkvault serve                              # Run the API server (uvicorn)
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys

import click
import httpx

from linkvault import __version__
from linkvault.client.api import DEFAULT_BASE_URL, ApiClient, ApiError
from linkvault.client.dashboard import DashboardStatus, LinkDashboard
from linkvault.client.session import SessionStore, user_from_token
from linkvault.client.storage import FileStorage

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_SESSION_FILE = "~/.linkvault/session.json"


def _api_url() -> str:
    return os.environ.get("LINKVAULT_API_URL", DEFAULT_BASE_URL).rstrip("/")


def _session() -> SessionStore:
    """Load the persisted session. Bootstrap finishes before anything is fetched."""
    path = os.environ.get("LINKVAULT_SESSION_FILE", DEFAULT_SESSION_FILE)
    store = SessionStore(FileStorage(path))
    store.bootstrap()
    return store


def _client(session: SessionStore) -> ApiClient:
    """Build an API client pointed at the LinkVault backend."""
    return ApiClient(_api_url(), session=session)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


def _require_login(session: SessionStore) -> None:
    if not session.is_authenticated:
        _fail("Not logged in. Run: linkvault login <email>")


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


async def _call(coro):
    """Await an API call, turning failures into a clean CLI error."""
    try:
        return await coro
    except ApiError as e:
        _fail(e.message)
    except httpx.TransportError:
        _fail(f"Backend not reachable at {_api_url()}")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="linkvault")
def main():
    """LinkVault — save and manage your links."""


# ---------------------------------------------------------------------------
# Account
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.password_option()
def register(email: str, password: str):
    """Create an account for EMAIL."""
    _run(_register_impl(email, password))


async def _register_impl(email: str, password: str):
    async with _client(_session()) as api:
        user = await _call(api.register(email, password))
    click.secho(f"Account created for {user['email']}.", fg="green")
    click.echo(f"Log in with: linkvault login {user['email']}")


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in as EMAIL and store the session."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    session = _session()
    async with _client(session) as api:
        token = await _call(api.login(email, password))
    session.login(token, user_from_token(token, email))
    click.secho(f"Logged in as {email}.", fg="green")


@main.command()
def logout():
    """Forget the stored session on this machine."""
    session = _session()
    session.logout()
    click.echo("Logged out.")


@main.command()
def whoami():
    """Show the user the server sees for the stored token."""
    _run(_whoami_impl())


async def _whoami_impl():
    session = _session()
    _require_login(session)
    async with _client(session) as api:
        user = await _call(api.profile())
    click.echo(f"{user['email']}  (id {user['id']})")


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


@main.command()
def links():
    """List your links, newest first."""
    _run(_links_impl())


async def _links_impl():
    session = _session()
    _require_login(session)
    async with _client(session) as api:
        dashboard = LinkDashboard(session, api)
        status = await dashboard.refresh()

    if status is DashboardStatus.FAILED:
        _fail(dashboard.error or "Could not load links")

    if not dashboard.links:
        click.echo("You haven't saved any links yet. Add one with: linkvault add TITLE URL")
        return

    click.secho(f"Links ({len(dashboard.links)}):", bold=True)
    click.echo()
    _print_table(
        [link.model_dump(mode="json") for link in dashboard.links],
        [
            ("ID", "id", 36),
            ("Title", "title", 30),
            ("URL", "url", 60),
        ],
    )


@main.command()
@click.argument("title")
@click.argument("url")
def add(title: str, url: str):
    """Save URL under TITLE."""
    _run(_add_impl(title, url))


async def _add_impl(title: str, url: str):
    session = _session()
    _require_login(session)
    async with _client(session) as api:
        dashboard = LinkDashboard(session, api)
        link = await dashboard.create_link(title, url)
    if link is None:
        _fail(dashboard.error or "Failed to create link")
    click.secho(f"Saved {link.title} ({link.id})", fg="green")


@main.command()
@click.argument("link_id")
def rm(link_id: str):
    """Delete the link LINK_ID."""
    _run(_rm_impl(link_id))


async def _rm_impl(link_id: str):
    session = _session()
    _require_login(session)
    async with _client(session) as api:
        message = await _call(api.delete_link(link_id))
    click.secho(message, fg="green")


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default from LINKVAULT_HOST)")
@click.option("--port", default=None, type=int, help="Port (default from LINKVAULT_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server with uvicorn."""
    import uvicorn

    from linkvault.config import settings

    uvicorn.run(
        "linkvault.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
