import logging
from typing import Any, Dict

from ..api.client import ApiClient
from ..core.errors import ApiError
from ..models.employee import EMPLOYEE_ROLES
from ..state.admin import SetSelectedTab
from ..state.store import AppState, Store
from .common import error_text, validate_form
from .employee_service import manager_options, refresh_employees
from .office_service import refresh_offices
from .project_service import refresh_projects

log = logging.getLogger(__name__)

RECENT_PROJECTS = 3


def load_initial_data(client: ApiClient, store: Store) -> None:
    """Fetch the three admin lists once the operator is authenticated."""
    refresh_offices(client, store)
    refresh_employees(client, store)
    refresh_projects(client, store)


def overview(state: AppState) -> Dict[str, Any]:
    admin = state.admin
    published = sum(1 for project in admin.projects if project.status == "PUBLISHED")
    # Roles with no employees are left out
    by_role = {role: sum(1 for e in admin.employees if e.role == role) for role in EMPLOYEE_ROLES}
    return {
        "user": state.auth.user.model_dump(),
        "selectedTab": admin.selectedTab,
        "counts": {
            "offices": len(admin.offices),
            "employees": len(admin.employees),
            "projects": len(admin.projects),
            "publishedProjects": published,
            "draftProjects": len(admin.projects) - published,
        },
        "employeesByRole": {role: count for role, count in by_role.items() if count},
        "recentProjects": [project.model_dump() for project in admin.projects[:RECENT_PROJECTS]],
        "managerOptions": [employee.model_dump() for employee in manager_options(admin.employees)],
        "isLoading": admin.isLoading,
        "error": admin.error,
    }


def set_selected_tab(store: Store, tab: str) -> str:
    action = validate_form(SetSelectedTab, {"tab": tab})
    store.dispatch(action)
    return store.state.admin.selectedTab


def backend_health(client: ApiClient) -> Dict[str, Any]:
    try:
        response = client.health_check()
    except ApiError as exc:
        log.exception("Backend health check failed")
        return {"ok": False, "error": error_text(exc)}
    return {"ok": True, "response": response}
