from fastapi import APIRouter, Body, Depends

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import developer_service

router = APIRouter(prefix="/developers")


@router.get("")
def list_developers(
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    return {"developers": developer_service.list_developers(client)}


@router.post("")
def create_developer(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return developer_service.create_developer(client, context.store, payload)


@router.get("/{developer_id}")
def get_developer(
    developer_id: str,
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    return developer_service.get_developer(client, developer_id)


@router.patch("/{developer_id}")
def update_developer(
    developer_id: str,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return developer_service.update_developer(client, context.store, developer_id, payload)


@router.delete("/{developer_id}")
def delete_developer(
    developer_id: str,
    confirm: bool = False,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return developer_service.delete_developer(client, context.store, developer_id, confirmed=confirm)
