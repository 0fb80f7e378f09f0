from datetime import date
from typing import Any, Dict, List, Literal, Optional, get_args

from pydantic import BaseModel, ConfigDict

from .employee import Employee

ProjectStatus = Literal["UNPUBLISHED", "PUBLISHED"]
ProjectType = Literal["RESIDENTIAL", "COMMERCIAL", "MIXED_USE"]
PropertyType = Literal["APARTMENT", "VILLA", "PLOT", "OFFICE", "SHOP", "WAREHOUSE"]
ImageType = Literal["EXTERIOR", "INTERIOR", "FLOOR_PLAN", "AMENITY", "LOCATION", "CONSTRUCTION", "OTHER"]

IMAGE_TYPES = get_args(ImageType)


class Approval(BaseModel):
    name: str
    authority: str
    approvalNumber: str
    approvalDate: str


class FloorPlan(BaseModel):
    type: str
    area: float
    areaUnit: str
    bedrooms: int
    bathrooms: int
    price: float


class ProjectImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    type: Optional[str] = "OTHER"
    caption: Optional[str] = ""


class Brochure(BaseModel):
    url: str
    name: str


class Project(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    description: Optional[str] = None
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    latitude: float = 0
    longitude: float = 0
    status: ProjectStatus = "UNPUBLISHED"
    projectType: Optional[str] = None
    propertyType: Optional[str] = None
    totalUnits: Optional[int] = None
    totalArea: Optional[float] = None
    areaUnit: Optional[str] = None
    expectedCompletionDate: Optional[str] = None
    constructionStartDate: Optional[str] = None
    amenities: List[str] = []
    amenitiesDescription: Optional[str] = None
    reraNumber: Optional[str] = None
    reraApprovalDate: Optional[str] = None
    reraWebsite: Optional[str] = None
    legalDetails: Optional[str] = None
    approvals: List[Dict[str, Any]] = []
    minPrice: Optional[float] = None
    maxPrice: Optional[float] = None
    currency: Optional[str] = None
    floorPlans: List[Dict[str, Any]] = []
    images: List[ProjectImage] = []
    brochures: List[Dict[str, Any]] = []
    realEstateDeveloperId: Optional[str] = None
    projectManagerId: Optional[str] = None
    salesManagerId: Optional[str] = None
    projectManager: Optional[Employee] = None
    salesManager: Optional[Employee] = None
    assignedEmployees: List[Dict[str, Any]] = []
    isActive: Optional[bool] = None
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None


class ProjectBody(BaseModel):
    name: str
    description: Optional[str] = None
    address: str
    city: str
    state: str
    pincode: str
    latitude: float
    longitude: float
    projectType: ProjectType
    propertyType: PropertyType
    totalUnits: int
    totalArea: float
    areaUnit: str
    expectedCompletionDate: str
    constructionStartDate: str
    amenities: List[str]
    amenitiesDescription: Optional[str] = None
    projectManagerId: Optional[str] = None
    salesManagerId: Optional[str] = None
    minPrice: Optional[float] = None
    maxPrice: Optional[float] = None
    currency: Optional[str] = None
    reraNumber: Optional[str] = None
    reraApprovalDate: Optional[str] = None
    reraWebsite: Optional[str] = None
    legalDetails: Optional[str] = None
    status: Optional[ProjectStatus] = None
    approvals: Optional[List[Approval]] = None
    floorPlans: Optional[List[FloorPlan]] = None
    images: Optional[List[ProjectImage]] = None
    brochures: Optional[List[Brochure]] = None


class PublishProjectBody(BaseModel):
    status: ProjectStatus


class AssignEmployeeBody(BaseModel):
    employeeId: str
    role: str
    assignedDate: Optional[date] = None


class DeleteImageBody(BaseModel):
    imageUrl: str
