from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse

from shortener_app.dependencies import get_link_service
from shortener_app.services.link_service import LinkService

router = APIRouter(tags=["redirect"])


@router.get("/{short_name}")
def redirect_to_long_url(
    short_name: str,
    link_service: LinkService = Depends(get_link_service),
):
    """
    Redirect to the original URL.

    Unknown names raise NotFoundError, answered with 404 by the global
    error handlers.
    """
    long_url = link_service.get_long_url_for_redirect(short_name)
    return RedirectResponse(url=long_url, status_code=status.HTTP_301_MOVED_PERMANENTLY)
