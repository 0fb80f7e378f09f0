from typing import Literal, Optional, get_args
from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .office import Office

EmployeeRole = Literal["ADMIN", "MANAGER", "SALES_MANAGER", "SALES_EXECUTIVE", "SALES", "FINANCE"]

EMPLOYEE_ROLES = get_args(EmployeeRole)
MANAGER_ROLES = frozenset({"ADMIN", "MANAGER", "SALES_MANAGER"})


def normalize_role(value):
    """Roles arrive lowercase from the API and are kept uppercase locally."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


class Employee(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True, coerce_numbers_to_str=True)

    id: str
    username: str = ""
    name: str = ""
    email: str = ""
    role: str = "SALES_EXECUTIVE"
    realEstateDeveloperId: str = ""
    officeId: str = ""
    employeeId: Optional[str] = None
    office: Optional[Office] = None

    @field_validator("role", mode="before")
    @classmethod
    def uppercase_role(cls, value):
        return normalize_role(value)


class EmployeeWriteBody(BaseModel):
    role: EmployeeRole

    @field_validator("role", mode="before")
    @classmethod
    def uppercase_role(cls, value):
        return normalize_role(value)

    @field_serializer("role")
    def lowercase_role(self, role: str) -> str:
        return role.lower()


class CreateEmployeeBody(EmployeeWriteBody):
    username: str
    password: str
    name: str
    email: str
    officeId: str
    employeeId: Optional[str] = None


class UpdateEmployeeBody(BaseModel):
    username: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[EmployeeRole] = None
    officeId: Optional[str] = None
    employeeId: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def uppercase_role(cls, value):
        return normalize_role(value)

    @field_serializer("role")
    def lowercase_role(self, role: Optional[str]) -> Optional[str]:
        return role.lower() if role else role


class ChangePasswordBody(BaseModel):
    oldPassword: str
    newPassword: str
