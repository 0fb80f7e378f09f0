from fastapi import APIRouter, Body, Depends, HTTPException

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import dashboard_service

router = APIRouter(prefix="/dashboard")


@router.get("")
def get_overview(
    refresh: bool = False,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    admin = context.store.state.admin
    if refresh or not (admin.offices or admin.employees or admin.projects):
        dashboard_service.load_initial_data(client, context.store)
    return dashboard_service.overview(context.store.state)


@router.put("/tab")
def select_tab(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    tab = payload.get("tab") if isinstance(payload, dict) else None
    if not tab:
        raise HTTPException(status_code=400, detail="tab is required")
    return {"selectedTab": dashboard_service.set_selected_tab(context.store, tab)}


@router.get("/backend-health")
def backend_health(
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    return dashboard_service.backend_health(client)
