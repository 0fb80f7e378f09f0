import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..api.client import ApiClient
from ..core.errors import ApiError, FormValidationError
from ..models.forms import EditProjectForm
from ..models.project import AssignEmployeeBody, Project, ProjectBody, PublishProjectBody
from ..state.admin import (
    AddProjectAmenity,
    AppendProjectAssignment,
    RemoveProjectAmenity,
    ResetProjectForm,
    SetProjectFormField,
    SetProjects,
)
from ..state.store import Store
from .common import (
    Outcome,
    error_text,
    parse_list,
    refresh_list,
    require_confirmation,
    run_mutation,
    set_form_field,
    validate_form,
)

log = logging.getLogger(__name__)

OPTIONAL_TEXT_FIELDS = (
    "description",
    "amenitiesDescription",
    "reraNumber",
    "reraApprovalDate",
    "reraWebsite",
    "legalDetails",
    "currency",
)


def clean_project_values(values: Dict[str, Any]) -> Dict[str, Any]:
    """Shape form values into a project request body.

    Blank amenities are dropped, blank optional text becomes absent and zero
    prices are treated as unset.
    """
    data = dict(values)
    data["amenities"] = [a for a in data.get("amenities") or [] if isinstance(a, str) and a.strip()]
    for field in OPTIONAL_TEXT_FIELDS:
        value = data.get(field)
        data[field] = value.strip() if isinstance(value, str) and value.strip() else None
    for field in ("minPrice", "maxPrice"):
        data[field] = data.get(field) or None
    return data


def refresh_projects(client: ApiClient, store: Store) -> Optional[List[Project]]:
    return refresh_list(store, client.list_projects, Project, lambda items: SetProjects(projects=items))


def list_published_projects(client: ApiClient) -> List[Project]:
    try:
        return parse_list(client.list_published_projects(), Project) or []
    except ApiError as exc:
        log.exception("Failed to list published projects: %s", error_text(exc))
        return []


def get_project(client: ApiClient, project_id: str) -> Optional[Project]:
    response = client.get_project(project_id)
    if isinstance(response, dict) and response.get("id") is not None:
        return Project.model_validate(response)
    return None


def find_project(store: Store, project_id: str) -> Optional[Project]:
    for project in store.state.admin.projects:
        if project.id == project_id:
            return project
    return None


# Pending project form

def set_project_field(store: Store, field: str, value: Any) -> None:
    set_form_field(store, SetProjectFormField(field=field, value=value))


def reset_project_form(store: Store) -> None:
    store.dispatch(ResetProjectForm())


def add_amenity(store: Store, name: str) -> List[str]:
    """Append a trimmed, not yet listed amenity to the pending project."""
    return list(store.dispatch(AddProjectAmenity(name=name or "")).admin.projectForm.amenities)


def remove_amenity(store: Store, index: int) -> List[str]:
    try:
        state = store.dispatch(RemoveProjectAmenity(index=index))
    except IndexError as exc:
        raise FormValidationError({"amenities": [str(exc)]}) from exc
    return list(state.admin.projectForm.amenities)


# Edit / publish / delete

def update_project(client: ApiClient, store: Store, project_id: str, data: dict) -> Outcome:
    form = validate_form(EditProjectForm, data)
    body = ProjectBody(**clean_project_values(form.model_dump()))
    return run_mutation(
        store,
        lambda: client.update_project(project_id, body),
        success_message="Project updated successfully",
        failure_message="Failed to update project",
        refresh=lambda: refresh_projects(client, store),
    )


def toggle_publish(client: ApiClient, store: Store, project_id: str) -> Outcome:
    project = find_project(store, project_id) or get_project(client, project_id)
    current = project.status if project else "UNPUBLISHED"
    status = "UNPUBLISHED" if current == "PUBLISHED" else "PUBLISHED"
    verb = "published" if status == "PUBLISHED" else "unpublished"
    return run_mutation(
        store,
        lambda: client.publish_project(project_id, PublishProjectBody(status=status)),
        success_message=f"Project {verb} successfully",
        failure_message="Failed to update project status",
        refresh=lambda: refresh_projects(client, store),
    )


def delete_project(client: ApiClient, store: Store, project_id: str, confirmed: bool = False) -> Outcome:
    require_confirmation(confirmed, "Are you sure you want to delete this project? This action cannot be undone.")
    return run_mutation(
        store,
        lambda: client.delete_project(project_id),
        success_message="Project deleted successfully",
        failure_message="Failed to delete project",
        refresh=lambda: refresh_projects(client, store),
    )


def assign_employee(
    client: ApiClient,
    store: Store,
    project_id: str,
    employee_id: str,
    role: str,
    assigned_date: Optional[date] = None,
) -> Outcome:
    body = validate_form(
        AssignEmployeeBody,
        {"employeeId": employee_id, "role": role, "assignedDate": assigned_date},
    )

    def _append(response: Any) -> None:
        assignment = response if isinstance(response, dict) else body.model_dump(mode="json", exclude_none=True)
        store.dispatch(AppendProjectAssignment(projectId=project_id, assignment=assignment))

    return run_mutation(
        store,
        lambda: client.assign_employee_to_project(project_id, body),
        success_message="Employee assigned successfully",
        failure_message="Failed to assign employee",
        refresh=lambda: refresh_projects(client, store),
        on_success=_append,
    )


def remove_employee(client: ApiClient, store: Store, project_id: str, employee_id: str) -> Outcome:
    return run_mutation(
        store,
        lambda: client.remove_employee_from_project(project_id, employee_id),
        success_message="Employee removed from project",
        failure_message="Failed to remove employee",
        refresh=lambda: refresh_projects(client, store),
    )
