from typing import Dict

from fastapi import APIRouter, Depends, Response, status

from shortener_app.dependencies import get_link_service, require_admin
from shortener_app.schemas.link import DeleteUserRequest
from shortener_app.services.link_service import LinkService

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@router.post("/delete", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    request_data: DeleteUserRequest,
    link_service: LinkService = Depends(get_link_service),
):
    """Delete a user together with every link they own"""
    link_service.delete_user(request_data.email)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users", response_model=Dict[str, int])
def list_users(link_service: LinkService = Depends(get_link_service)):
    """Every registered email with the number of links it owns"""
    return link_service.list_users()
