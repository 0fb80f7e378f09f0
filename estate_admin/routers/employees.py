from fastapi import APIRouter, Body, Depends, HTTPException

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import employee_service

router = APIRouter(prefix="/employees")


@router.get("")
def list_employees(
    refresh: bool = True,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    if refresh:
        employee_service.refresh_employees(client, context.store)
    admin = context.store.state.admin
    return {"employees": admin.employees, "isLoading": admin.isLoading, "error": admin.error}


@router.get("/managers")
def list_manager_options(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    return {"employees": employee_service.manager_options(context.store.state.admin.employees)}


@router.get("/form")
def get_employee_form(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    return context.store.state.admin.employeeForm


@router.patch("/form")
def update_employee_form(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    if not payload:
        raise HTTPException(status_code=400, detail="at least one field is required")
    for field, value in payload.items():
        employee_service.set_employee_field(context.store, field, value)
    return context.store.state.admin.employeeForm


@router.delete("/form")
def reset_employee_form(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    employee_service.reset_employee_form(context.store)
    return context.store.state.admin.employeeForm


@router.post("")
def create_employee(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return employee_service.create_employee(client, context.store)


@router.get("/{employee_id}")
def get_employee(
    employee_id: str,
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    return employee_service.get_employee(client, employee_id)


@router.patch("/{employee_id}")
def update_employee(
    employee_id: str,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return employee_service.update_employee(client, context.store, employee_id, payload)


@router.delete("/{employee_id}")
def delete_employee(
    employee_id: str,
    confirm: bool = False,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return employee_service.delete_employee(client, context.store, employee_id, confirmed=confirm)
