from fastapi import APIRouter, Body, Depends, HTTPException

from ..api.client import ApiClient
from ..core.context import DashboardContext, get_api_client, get_context, require_session
from ..models.user import SessionUser
from ..services import project_service

router = APIRouter(prefix="/projects")


def project_form_editable(context: DashboardContext = Depends(get_context)) -> DashboardContext:
    """The pending project form belongs to the wizard while one is open."""
    if context.wizard is not None and not context.wizard.closed:
        raise HTTPException(status_code=409, detail="A project wizard is in progress")
    return context


@router.get("")
def list_projects(
    refresh: bool = True,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    if refresh:
        project_service.refresh_projects(client, context.store)
    admin = context.store.state.admin
    return {"projects": admin.projects, "isLoading": admin.isLoading, "error": admin.error}


@router.get("/published")
def list_published_projects(
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    return {"projects": project_service.list_published_projects(client)}


# Pending project form

@router.get("/form")
def get_project_form(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
):
    return context.store.state.admin.projectForm


@router.patch("/form")
def update_project_form(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(project_form_editable),
):
    if not payload:
        raise HTTPException(status_code=400, detail="at least one field is required")
    for field, value in payload.items():
        project_service.set_project_field(context.store, field, value)
    return context.store.state.admin.projectForm


@router.delete("/form")
def reset_project_form(
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(project_form_editable),
):
    project_service.reset_project_form(context.store)
    return context.store.state.admin.projectForm


@router.post("/form/amenities")
def add_amenity(
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(project_form_editable),
):
    name = payload.get("name") if isinstance(payload, dict) else None
    if not name:
        raise HTTPException(status_code=400, detail="name is required")
    return {"amenities": project_service.add_amenity(context.store, name)}


@router.delete("/form/amenities/{index}")
def remove_amenity(
    index: int,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(project_form_editable),
):
    return {"amenities": project_service.remove_amenity(context.store, index)}


# Existing projects

@router.get("/{project_id}")
def get_project(
    project_id: str,
    user: SessionUser = Depends(require_session),
    client: ApiClient = Depends(get_api_client),
):
    project = project_service.get_project(client, project_id)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.patch("/{project_id}")
def update_project(
    project_id: str,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return project_service.update_project(client, context.store, project_id, payload)


@router.delete("/{project_id}")
def delete_project(
    project_id: str,
    confirm: bool = False,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return project_service.delete_project(client, context.store, project_id, confirmed=confirm)


@router.post("/{project_id}/publish")
def toggle_publish(
    project_id: str,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return project_service.toggle_publish(client, context.store, project_id)


@router.post("/{project_id}/employees")
def assign_employee(
    project_id: str,
    payload: dict = Body(...),
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    employee_id = payload.get("employeeId") if isinstance(payload, dict) else None
    role = payload.get("role") if isinstance(payload, dict) else None
    if not employee_id or not role:
        raise HTTPException(status_code=400, detail="employeeId and role are required")
    return project_service.assign_employee(
        client,
        context.store,
        project_id,
        employee_id,
        role,
        assigned_date=payload.get("assignedDate"),
    )


@router.delete("/{project_id}/employees/{employee_id}")
def remove_employee(
    project_id: str,
    employee_id: str,
    user: SessionUser = Depends(require_session),
    context: DashboardContext = Depends(get_context),
    client: ApiClient = Depends(get_api_client),
):
    return project_service.remove_employee(client, context.store, project_id, employee_id)
