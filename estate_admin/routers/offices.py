from fastapi import APIRouter, Body, Depends, HTTPException

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import office_service

router = APIRouter(prefix="/offices")


@router.get("")
def list_offices(
    refresh: bool = True,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    if refresh:
        office_service.refresh_offices(client, context.store)
    admin = context.store.state.admin
    return {"offices": admin.offices, "isLoading": admin.isLoading, "error": admin.error}


@router.get("/form")
def get_office_form(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    return context.store.state.admin.officeForm


@router.patch("/form")
def update_office_form(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    if not payload:
        raise HTTPException(status_code=400, detail="at least one field is required")
    for field, value in payload.items():
        office_service.set_office_field(context.store, field, value)
    return context.store.state.admin.officeForm


@router.delete("/form")
def reset_office_form(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    office_service.reset_office_form(context.store)
    return context.store.state.admin.officeForm


@router.post("")
def create_office(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return office_service.create_office(client, context.store)


@router.get("/{office_id}")
def get_office(
    office_id: str,
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    return office_service.get_office(client, office_id)


@router.patch("/{office_id}")
def update_office(
    office_id: str,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return office_service.update_office(client, context.store, office_id, payload)


@router.delete("/{office_id}")
def delete_office(
    office_id: str,
    confirm: bool = False,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return office_service.delete_office(client, context.store, office_id, confirmed=confirm)
