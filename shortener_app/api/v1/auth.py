from fastapi import APIRouter, Depends

from shortener_app.dependencies import get_link_service
from shortener_app.schemas.link import RegisterRequest, TokenResponse
from shortener_app.services.link_service import LinkService

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=TokenResponse)
def register(
    request_data: RegisterRequest,
    link_service: LinkService = Depends(get_link_service),
):
    """
    Register an email and return its bearer token.

    No password and no verification step: the token alone authenticates
    the user from now on.
    """
    return TokenResponse(token=link_service.register_user(request_data.email))
