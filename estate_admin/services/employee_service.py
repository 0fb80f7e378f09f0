from typing import Any, List, Optional, Sequence

from ..api.client import ApiClient
from ..models.employee import CreateEmployeeBody, Employee, MANAGER_ROLES, UpdateEmployeeBody
from ..models.forms import EmployeeForm
from ..state.admin import ResetEmployeeForm, SetEmployeeFormField, SetEmployees
from ..state.store import Store
from .common import Outcome, refresh_list, require_confirmation, run_mutation, set_form_field, validate_form


def refresh_employees(client: ApiClient, store: Store) -> Optional[List[Employee]]:
    return refresh_list(store, client.list_employees, Employee, lambda items: SetEmployees(employees=items))


def set_employee_field(store: Store, field: str, value: Any) -> None:
    set_form_field(store, SetEmployeeFormField(field=field, value=value))


def reset_employee_form(store: Store) -> None:
    store.dispatch(ResetEmployeeForm())


def manager_options(employees: Sequence[Employee]) -> List[Employee]:
    """Employees eligible to manage a project; everyone when nobody qualifies."""
    managers = [e for e in employees if (e.role or "").upper() in MANAGER_ROLES]
    return managers or list(employees)


def create_employee(client: ApiClient, store: Store) -> Outcome:
    form = validate_form(EmployeeForm, store.state.admin.employeeForm.model_dump())
    data = form.model_dump()
    data["employeeId"] = (data.get("employeeId") or "").strip() or None
    body = CreateEmployeeBody(**data)
    outcome = run_mutation(
        store,
        lambda: client.create_employee(body),
        success_message="Employee created successfully",
        failure_message="Failed to create employee",
        refresh=lambda: refresh_employees(client, store),
        require_id=True,
    )
    if outcome.ok:
        store.dispatch(ResetEmployeeForm())
    return outcome


def get_employee(client: ApiClient, employee_id: str) -> Any:
    return client.get_employee(employee_id)


def update_employee(client: ApiClient, store: Store, employee_id: str, data: dict) -> Outcome:
    body = validate_form(UpdateEmployeeBody, data)
    return run_mutation(
        store,
        lambda: client.update_employee(employee_id, body),
        success_message="Employee updated successfully",
        failure_message="Failed to update employee",
        refresh=lambda: refresh_employees(client, store),
    )


def delete_employee(client: ApiClient, store: Store, employee_id: str, confirmed: bool = False) -> Outcome:
    require_confirmation(confirmed, "Are you sure you want to delete this employee?")
    return run_mutation(
        store,
        lambda: client.delete_employee(employee_id),
        success_message="Employee deleted successfully",
        failure_message="Failed to delete employee",
        refresh=lambda: refresh_employees(client, store),
    )
