from fastapi import APIRouter, Body, Depends, HTTPException, Request, Response

from ..api.client import ApiClient
from ..core.auth import clear_access_token, get_access_token, set_access_token
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import auth_service
from ..state.session import ClearError

router = APIRouter(prefix="/auth")


@router.post("/login")
def login(
    response: Response,
    payload: dict = Body(...),
    context: DashboardContext = Depends(get_context),
):
    result = auth_service.login(
        context.client(None),
        context.store,
        context.snapshots,
        payload.get("username", ""),
        payload.get("password", ""),
    )
    if not result.ok:
        raise HTTPException(status_code=401, detail=result.error)
    set_access_token(response, result.token, context.settings)
    return {"user": result.user, "redirect": result.redirect}


@router.post("/logout")
def logout(response: Response, context: DashboardContext = Depends(get_context)):
    context.discard_workspaces()
    auth_service.logout(context.store, context.snapshots)
    clear_access_token(response, context.settings)
    return {"redirect": auth_service.LOGIN_PATH}


@router.get("/session")
def session(request: Request, response: Response, context: DashboardContext = Depends(get_context)):
    token = get_access_token(request, context.settings)
    if token and not auth_service.restore_session(context.store, context.snapshots, token):
        clear_access_token(response, context.settings)
    return context.store.state.auth


@router.post("/clear-error")
def clear_error(context: DashboardContext = Depends(get_context)):
    context.store.dispatch(ClearError())
    return context.store.state.auth


@router.post("/register")
def register(payload: dict = Body(...), client: ApiClient = Depends(get_api_client)):
    return auth_service.register(client, payload)


@router.get("/profile")
def profile(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return auth_service.refresh_profile(client, context.store, context.snapshots)


@router.post("/change-password")
def change_password(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    old_password = payload.get("oldPassword")
    new_password = payload.get("newPassword")
    if not old_password or not new_password:
        raise HTTPException(status_code=400, detail="oldPassword and newPassword are required")
    return auth_service.change_password(client, old_password, new_password)
