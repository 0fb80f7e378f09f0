from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .employee import EmployeeWriteBody, normalize_role


class SessionUser(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", coerce_numbers_to_str=True)

    id: str = ""
    username: str = ""
    name: str = ""
    email: str = ""
    role: str = "SALES_EXECUTIVE"
    realEstateDeveloperId: str = ""
    officeId: str = ""
    employeeId: Optional[str] = ""

    @field_validator("role", mode="before")
    @classmethod
    def uppercase_role(cls, value):
        return normalize_role(value)


ANONYMOUS_USER = SessionUser()


class LoginBody(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterBody(EmployeeWriteBody):
    username: str
    password: str
    name: str
    email: str
    realEstateDeveloperId: str
    officeId: str
    employeeId: Optional[str] = None
