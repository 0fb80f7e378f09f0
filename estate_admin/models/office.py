from typing import Optional
from pydantic import BaseModel, ConfigDict


class Office(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    isMainOffice: Optional[bool] = None


class CreateOfficeBody(BaseModel):
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    isMainOffice: Optional[bool] = None


class UpdateOfficeBody(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    region: Optional[str] = None
    phone: Optional[str] = None
    isMainOffice: Optional[bool] = None
