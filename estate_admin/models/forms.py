"""Pending form drafts and the schemas that gate their submission.

Drafts hold whatever the operator has typed so far; they only check that each
field exists and carries a value of the right type. The ``*Form`` and ``*Step``
schemas apply the submission rules (required fields, ranges, formats).
"""
from datetime import date
from typing import Annotated, Any, Dict, List, Optional

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic_core import PydanticCustomError

from .employee import EmployeeRole, normalize_role
from .project import ProjectStatus, ProjectType, PropertyType

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

_url_adapter = TypeAdapter(AnyUrl)
_date_adapter = TypeAdapter(date)


def required(label: str):
    def _check(value: str) -> str:
        if not value:
            raise PydanticCustomError("required", "{label} is required", {"label": label})
        return value

    return Annotated[str, AfterValidator(_check)]


def _optional_url(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    try:
        _url_adapter.validate_python(value)
    except ValueError:
        raise PydanticCustomError("url", "Must be a valid URL")
    return value


def _optional_date(value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    try:
        _date_adapter.validate_python(value)
    except ValueError:
        raise PydanticCustomError("date", "Must be a valid date")
    return value


OptionalUrl = Annotated[Optional[str], AfterValidator(_optional_url)]
OptionalDate = Annotated[Optional[str], AfterValidator(_optional_date)]


# Drafts

class _Draft(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    def with_field(self, field: str, value: Any):
        """Return a copy with ``field`` replaced, validated against the draft schema."""
        data = self.model_dump()
        data[field] = value
        return type(self).model_validate(data)


class OfficeDraft(_Draft):
    name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    region: str = ""
    phone: str = ""
    isMainOffice: bool = False


class EmployeeDraft(_Draft):
    username: str = ""
    password: str = ""
    name: str = ""
    email: str = ""
    role: EmployeeRole = "SALES_EXECUTIVE"
    officeId: str = ""
    employeeId: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def uppercase_role(cls, value):
        return normalize_role(value)


class ProjectDraft(_Draft):
    name: str = ""
    description: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    latitude: float = 0
    longitude: float = 0
    projectType: ProjectType = "RESIDENTIAL"
    propertyType: PropertyType = "APARTMENT"
    totalUnits: int = 1
    totalArea: float = 0
    areaUnit: str = "sqft"
    expectedCompletionDate: str = ""
    constructionStartDate: str = ""
    amenities: List[str] = [""]
    amenitiesDescription: str = ""
    projectManagerId: str = ""
    salesManagerId: str = ""
    minPrice: float = 0
    maxPrice: float = 0
    currency: str = "INR"
    reraNumber: str = ""
    reraApprovalDate: str = ""
    reraWebsite: str = ""
    legalDetails: str = ""
    approvals: List[Dict[str, Any]] = []
    floorPlans: List[Dict[str, Any]] = []
    images: List[Dict[str, Any]] = []
    brochures: List[Dict[str, Any]] = []


# Submission schemas

class OfficeForm(BaseModel):
    name: required("Office name")
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    isMainOffice: Optional[bool] = None


class EmployeeForm(BaseModel):
    username: required("Username")
    password: str = Field(min_length=6)
    name: required("Name")
    email: str = Field(pattern=EMAIL_PATTERN)
    role: EmployeeRole
    officeId: required("Office")
    employeeId: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def uppercase_role(cls, value):
        return normalize_role(value)


class BasicInfoStep(BaseModel):
    name: required("Project name")
    description: Optional[str] = None
    projectType: ProjectType
    propertyType: PropertyType


class LocationStep(BaseModel):
    address: required("Address")
    city: required("City")
    state: required("State")
    pincode: required("Pincode")
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class PropertyDetailsStep(BaseModel):
    totalUnits: int = Field(ge=1)
    totalArea: float = Field(ge=0)
    areaUnit: required("Area unit")
    constructionStartDate: required("Construction start date")
    expectedCompletionDate: required("Expected completion date")


class ManagementStep(BaseModel):
    projectManagerId: required("Project manager")
    salesManagerId: required("Sales manager")


class AmenitiesStep(BaseModel):
    amenities: List[str]
    amenitiesDescription: Optional[str] = None

    @field_validator("amenities")
    @classmethod
    def at_least_one(cls, value: List[str]) -> List[str]:
        if not [a for a in value if a.strip()]:
            raise PydanticCustomError("amenities", "At least one amenity is required")
        return value


class PricingStep(BaseModel):
    minPrice: Optional[float] = Field(default=None, ge=0)
    maxPrice: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = None


class LegalStep(BaseModel):
    reraNumber: Optional[str] = None
    reraApprovalDate: OptionalDate = None
    reraWebsite: OptionalUrl = None
    legalDetails: Optional[str] = None


class EditProjectForm(BasicInfoStep, LocationStep, PropertyDetailsStep, PricingStep, LegalStep):
    amenities: List[str] = []
    amenitiesDescription: Optional[str] = None
    status: Optional[ProjectStatus] = None
