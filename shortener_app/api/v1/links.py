from fastapi import APIRouter, Depends

from shortener_app.dependencies import get_current_identity, get_link_service
from shortener_app.schemas.link import LinkCreate, LinkCreated
from shortener_app.services.link_service import LinkService

router = APIRouter(tags=["links"])


@router.post("/create", response_model=LinkCreated)
def create_short_link(
    link_data: LinkCreate,
    owner: str = Depends(get_current_identity),
    link_service: LinkService = Depends(get_link_service),
):
    """Create a short link owned by the authenticated user"""
    short_name = link_service.create_short_link(link_data.link, owner, name=link_data.name)
    return LinkCreated(short_link=short_name)
