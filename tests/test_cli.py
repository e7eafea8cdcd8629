"""CLI commands, offline and against a fake backend."""

import json
import uuid

import httpx
import pytest
from click.testing import CliRunner

from linkvault.auth.jwt import create_access_token
from linkvault.cli import main as cli_main
from linkvault.cli.main import main
from linkvault.client.api import ApiClient
from linkvault.client.session import TOKEN_KEY, USER_KEY, SessionUser
from linkvault.client.storage import FileStorage


@pytest.fixture()
def session_file(tmp_path, monkeypatch):
    path = tmp_path / "session.json"
    monkeypatch.setenv("LINKVAULT_SESSION_FILE", str(path))
    monkeypatch.setenv("LINKVAULT_API_URL", "http://127.0.0.1:9")
    return path


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "linkvault" in result.output


def test_logout_clears_stored_session(session_file):
    storage = FileStorage(session_file)
    storage.set_item(TOKEN_KEY, "tok")
    storage.set_item(USER_KEY, SessionUser(id="u1", email="me@example.com").model_dump_json())

    result = CliRunner().invoke(main, ["logout"])

    assert result.exit_code == 0
    assert "Logged out" in result.output
    assert storage.get_item(TOKEN_KEY) is None
    assert storage.get_item(USER_KEY) is None


@pytest.mark.parametrize("args", [["whoami"], ["links"], ["add", "t", "https://x"], ["rm", "id"]])
def test_commands_need_login(session_file, args):
    result = CliRunner().invoke(main, args)
    assert result.exit_code == 1
    assert "Not logged in" in result.output


class FakeBackend:
    """Just enough of /api for the CLI: login, list, create, delete."""

    def __init__(self):
        self.user_id = str(uuid.uuid4())
        self.links: list[dict] = []
        self.auth_headers: list[str | None] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == "/api/auth/login":
            token = create_access_token(self.user_id)
            return httpx.Response(200, json={"message": "Logged in successfully!", "token": token})

        self.auth_headers.append(request.headers.get("Authorization"))
        if path == "/api/links" and request.method == "GET":
            return httpx.Response(200, json=self.links)
        if path == "/api/links" and request.method == "POST":
            body = json.loads(request.content)
            link = {
                "id": str(uuid.uuid4()),
                "title": body["title"],
                "url": body["url"],
                "ownerId": self.user_id,
                "createdAt": "2026-10-19T09:00:00Z",
            }
            self.links.insert(0, link)
            return httpx.Response(201, json=link)
        if path.startswith("/api/links/") and request.method == "DELETE":
            link_id = path.rsplit("/", 1)[-1]
            remaining = [link for link in self.links if link["id"] != link_id]
            if len(remaining) == len(self.links):
                return httpx.Response(404, json={"error": "Link not found."})
            self.links = remaining
            return httpx.Response(200, json={"message": "Link deleted successfully."})
        return httpx.Response(404, json={"error": "Not found."})


@pytest.fixture()
def backend(session_file, monkeypatch):
    fake = FakeBackend()

    def client_for(session):
        return ApiClient(
            "http://api.test",
            session=session,
            transport=httpx.MockTransport(fake),
            retry_backoff=0,
        )

    monkeypatch.setattr(cli_main, "_client", client_for)
    return fake


def test_login_then_manage_links(session_file, backend):
    runner = CliRunner()

    result = runner.invoke(main, ["login", "me@example.com", "--password", "pw"])
    assert result.exit_code == 0, result.output
    assert "Logged in as me@example.com" in result.output

    storage = FileStorage(session_file)
    token = storage.get_item(TOKEN_KEY)
    assert token
    assert SessionUser.model_validate_json(storage.get_item(USER_KEY)).id == backend.user_id

    result = runner.invoke(main, ["links"])
    assert result.exit_code == 0, result.output
    assert "haven't saved any links" in result.output

    result = runner.invoke(main, ["add", "Docs", "https://example.com/docs"])
    assert result.exit_code == 0, result.output
    link_id = backend.links[0]["id"]
    assert f"Saved Docs ({link_id})" in result.output

    result = runner.invoke(main, ["links"])
    assert result.exit_code == 0, result.output
    assert "Docs" in result.output
    assert link_id in result.output

    result = runner.invoke(main, ["rm", link_id])
    assert result.exit_code == 0, result.output
    assert "Link deleted successfully." in result.output
    assert backend.links == []

    assert backend.auth_headers
    assert set(backend.auth_headers) == {f"Bearer {token}"}


def test_server_error_message_is_shown(session_file, backend):
    runner = CliRunner()
    runner.invoke(main, ["login", "me@example.com", "--password", "pw"])

    result = runner.invoke(main, ["rm", "missing"])
    assert result.exit_code == 1
    assert "Link not found." in result.output
