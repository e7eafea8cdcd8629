"""Link API routes — every handler acts on the gate's user only."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from linkvault.db.engine import get_db
from linkvault.schemas.link import LinkCreate, LinkRead, MessageResponse
from linkvault.services.link_service import LinkService

router = APIRouter(prefix="/links")


def _svc(db: AsyncSession = Depends(get_db)) -> LinkService:
    return LinkService(db)


@router.get("", response_model=list[LinkRead])
async def list_links(request: Request, svc: LinkService = Depends(_svc)):
    """The caller's links, newest first. Empty list when there are none."""
    return await svc.list(request.state.user)


@router.post("", response_model=LinkRead, status_code=201)
async def create_link(
    request: Request,
    body: LinkCreate,
    svc: LinkService = Depends(_svc),
):
    return await svc.create(request.state.user, body.title, body.url)


@router.delete("/{link_id}", response_model=MessageResponse)
async def delete_link(
    request: Request,
    link_id: str,
    svc: LinkService = Depends(_svc),
):
    """Delete one of the caller's links. 404 if missing, 403 if not theirs."""
    await svc.delete(request.state.user, link_id)
    return {"message": "Link deleted successfully."}
