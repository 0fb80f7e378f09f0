from typing import Any, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from ..models.employee import Employee
from ..models.forms import EmployeeDraft, OfficeDraft, ProjectDraft
from ..models.office import Office
from ..models.project import Project
from .session import Logout

AdminTab = Literal["dashboard", "offices", "employees", "projects"]


class AdminState(BaseModel):
    model_config = ConfigDict(frozen=True)

    officeForm: OfficeDraft = OfficeDraft()
    employeeForm: EmployeeDraft = EmployeeDraft()
    projectForm: ProjectDraft = ProjectDraft()
    offices: Tuple[Office, ...] = ()
    employees: Tuple[Employee, ...] = ()
    projects: Tuple[Project, ...] = ()
    selectedTab: AdminTab = "dashboard"
    # Shared by every admin operation
    isLoading: bool = False
    error: Optional[str] = None


class SetSelectedTab(BaseModel):
    type: Literal["admin/setSelectedTab"] = "admin/setSelectedTab"
    tab: AdminTab


class SetOfficeFormField(BaseModel):
    type: Literal["admin/setOfficeFormField"] = "admin/setOfficeFormField"
    field: str
    value: Any = None


class ResetOfficeForm(BaseModel):
    type: Literal["admin/resetOfficeForm"] = "admin/resetOfficeForm"


class SetEmployeeFormField(BaseModel):
    type: Literal["admin/setEmployeeFormField"] = "admin/setEmployeeFormField"
    field: str
    value: Any = None


class ResetEmployeeForm(BaseModel):
    type: Literal["admin/resetEmployeeForm"] = "admin/resetEmployeeForm"


class SetProjectFormField(BaseModel):
    type: Literal["admin/setProjectFormField"] = "admin/setProjectFormField"
    field: str
    value: Any = None


class ResetProjectForm(BaseModel):
    type: Literal["admin/resetProjectForm"] = "admin/resetProjectForm"


class AddProjectAmenity(BaseModel):
    type: Literal["admin/addProjectAmenity"] = "admin/addProjectAmenity"
    name: str


class RemoveProjectAmenity(BaseModel):
    type: Literal["admin/removeProjectAmenity"] = "admin/removeProjectAmenity"
    index: int


class SetOffices(BaseModel):
    type: Literal["admin/setOffices"] = "admin/setOffices"
    offices: Tuple[Office, ...]


class AddOffice(BaseModel):
    type: Literal["admin/addOffice"] = "admin/addOffice"
    office: Office


class SetEmployees(BaseModel):
    type: Literal["admin/setEmployees"] = "admin/setEmployees"
    employees: Tuple[Employee, ...]


class AddEmployee(BaseModel):
    type: Literal["admin/addEmployee"] = "admin/addEmployee"
    employee: Employee


class SetProjects(BaseModel):
    type: Literal["admin/setProjects"] = "admin/setProjects"
    projects: Tuple[Project, ...]


class AddProject(BaseModel):
    type: Literal["admin/addProject"] = "admin/addProject"
    project: Project


class AppendProjectAssignment(BaseModel):
    type: Literal["admin/appendProjectAssignment"] = "admin/appendProjectAssignment"
    projectId: str
    assignment: Dict[str, Any]


class SetLoading(BaseModel):
    type: Literal["admin/setLoading"] = "admin/setLoading"
    value: bool


class SetError(BaseModel):
    type: Literal["admin/setError"] = "admin/setError"
    message: Optional[str] = None


AdminAction = Union[
    SetSelectedTab,
    SetOfficeFormField,
    ResetOfficeForm,
    SetEmployeeFormField,
    ResetEmployeeForm,
    SetProjectFormField,
    ResetProjectForm,
    AddProjectAmenity,
    RemoveProjectAmenity,
    SetOffices,
    AddOffice,
    SetEmployees,
    AddEmployee,
    SetProjects,
    AddProject,
    AppendProjectAssignment,
    SetLoading,
    SetError,
]


def _append_assignment(projects: Tuple[Project, ...], project_id: str, assignment: Dict[str, Any]):
    updated = []
    for project in projects:
        if project.id == project_id:
            project = project.model_copy(update={"assignedEmployees": [*project.assignedEmployees, assignment]})
        updated.append(project)
    return tuple(updated)


def _add_amenity(state: AdminState, name: str) -> AdminState:
    """Append a trimmed amenity that is not listed yet; blank rows are dropped."""
    name = (name or "").strip()
    amenities = [a for a in state.projectForm.amenities if a.strip()]
    if name and name not in amenities:
        amenities.append(name)
    if amenities == state.projectForm.amenities:
        return state
    return state.model_copy(update={"projectForm": state.projectForm.with_field("amenities", amenities)})


def _remove_amenity(state: AdminState, index: int) -> AdminState:
    amenities = list(state.projectForm.amenities)
    if not 0 <= index < len(amenities):
        raise IndexError(f"No amenity at position {index}")
    del amenities[index]
    return state.model_copy(update={"projectForm": state.projectForm.with_field("amenities", amenities)})


def reduce_admin(state: AdminState, action) -> AdminState:
    """Apply ``action`` and return the next snapshot.

    Form field updates are validated against the draft schema; an unknown
    field or a value of the wrong type raises ``pydantic.ValidationError`` and
    no new snapshot is produced.
    """
    if isinstance(action, Logout):
        return AdminState()

    if isinstance(action, SetSelectedTab):
        return state.model_copy(update={"selectedTab": action.tab})

    if isinstance(action, SetOfficeFormField):
        return state.model_copy(update={"officeForm": state.officeForm.with_field(action.field, action.value)})
    if isinstance(action, ResetOfficeForm):
        return state.model_copy(update={"officeForm": OfficeDraft()})
    if isinstance(action, SetEmployeeFormField):
        return state.model_copy(update={"employeeForm": state.employeeForm.with_field(action.field, action.value)})
    if isinstance(action, ResetEmployeeForm):
        return state.model_copy(update={"employeeForm": EmployeeDraft()})
    if isinstance(action, SetProjectFormField):
        return state.model_copy(update={"projectForm": state.projectForm.with_field(action.field, action.value)})
    if isinstance(action, ResetProjectForm):
        return state.model_copy(update={"projectForm": ProjectDraft()})
    if isinstance(action, AddProjectAmenity):
        return _add_amenity(state, action.name)
    if isinstance(action, RemoveProjectAmenity):
        return _remove_amenity(state, action.index)

    if isinstance(action, SetOffices):
        return state.model_copy(update={"offices": tuple(action.offices)})
    if isinstance(action, AddOffice):
        return state.model_copy(update={"offices": (*state.offices, action.office)})
    if isinstance(action, SetEmployees):
        return state.model_copy(update={"employees": tuple(action.employees)})
    if isinstance(action, AddEmployee):
        return state.model_copy(update={"employees": (*state.employees, action.employee)})
    if isinstance(action, SetProjects):
        return state.model_copy(update={"projects": tuple(action.projects)})
    if isinstance(action, AddProject):
        return state.model_copy(update={"projects": (*state.projects, action.project)})
    if isinstance(action, AppendProjectAssignment):
        return state.model_copy(
            update={"projects": _append_assignment(state.projects, action.projectId, action.assignment)}
        )

    if isinstance(action, SetLoading):
        return state.model_copy(update={"isLoading": action.value})
    if isinstance(action, SetError):
        return state.model_copy(update={"error": action.message})
    return state
