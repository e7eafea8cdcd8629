"""LinkService and AuthService called directly, without HTTP."""

import pytest

from linkvault.errors import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from linkvault.services.auth_service import AuthService
from linkvault.services.link_service import LinkService


@pytest.mark.asyncio
async def test_register_and_login(db_session):
    svc = AuthService(db_session)
    user = await svc.register("svc@example.com", "password_123")
    assert user.password_hash != "password_123"

    token = await svc.login("svc@example.com", "password_123")
    assert isinstance(token, str)

    with pytest.raises(ConflictError):
        await svc.register("svc@example.com", "another")
    with pytest.raises(AuthError):
        await svc.login("svc@example.com", "nope")


@pytest.mark.asyncio
async def test_register_requires_fields(db_session):
    with pytest.raises(ValidationError):
        await AuthService(db_session).register("", "password")


@pytest.mark.asyncio
async def test_link_lifecycle(db_session):
    auth = AuthService(db_session)
    alice = await auth.register("alice@example.com", "password_123")
    bob = await auth.register("bob@example.com", "password_123")

    links = LinkService(db_session)
    link = await links.create(alice, "  Title  ", " https://example.com ")
    assert link.title == "Title"
    assert link.url == "https://example.com"
    assert link.owner_id == alice.id
    assert link.created_at is not None

    with pytest.raises(ForbiddenError):
        await links.delete(bob, link.id)
    assert [l.id for l in await links.list(alice)] == [link.id]

    await links.delete(alice, link.id)
    assert await links.list(alice) == []

    with pytest.raises(NotFoundError):
        await links.delete(alice, link.id)


@pytest.mark.asyncio
async def test_create_requires_title_and_url(db_session):
    owner = await AuthService(db_session).register("o@example.com", "password_123")
    with pytest.raises(ValidationError):
        await LinkService(db_session).create(owner, "", "https://example.com")
    with pytest.raises(ValidationError):
        await LinkService(db_session).create(owner, "Title", "  ")
