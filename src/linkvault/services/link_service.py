"""Link service — CRUD scoped to a single owner."""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from linkvault.db.models import Link, User
from linkvault.errors import ForbiddenError, NotFoundError, ValidationError

logger = structlog.get_logger()


class LinkService:
    """Business logic for a user's links."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, owner: User, title: str, url: str) -> Link:
        title = (title or "").strip()
        url = (url or "").strip()
        if not title or not url:
            raise ValidationError("Title and URL are required.")

        link = Link(title=title, url=url, owner_id=owner.id)
        self.db.add(link)
        await self.db.commit()
        logger.info("links.created", link_id=str(link.id))
        return link

    async def list(self, owner: User) -> list[Link]:
        """All of owner's links, newest first."""
        result = await self.db.execute(
            select(Link)
            .where(Link.owner_id == owner.id)
            .order_by(Link.created_at.desc(), Link.id.desc())
        )
        return list(result.scalars().all())

    async def delete(self, owner: User, link_id: uuid.UUID | str) -> None:
        """Delete one of owner's links.

        The row is locked on lookup (where the backend supports it) and the
        ownership check and delete commit as one transaction.
        """
        try:
            link_id = uuid.UUID(str(link_id))
        except ValueError:
            raise NotFoundError("Link not found.")

        result = await self.db.execute(
            select(Link).where(Link.id == link_id).with_for_update()
        )
        link = result.scalars().first()
        if link is None:
            raise NotFoundError("Link not found.")
        if link.owner_id != owner.id:
            logger.warning("links.delete_forbidden", link_id=str(link_id))
            raise ForbiddenError("You are not allowed to delete this link.")

        await self.db.delete(link)
        await self.db.commit()
        logger.info("links.deleted", link_id=str(link_id))
