from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RealEstateDeveloper(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class CreateDeveloperBody(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    ownerUsername: str = Field(min_length=1)
    ownerPassword: str = Field(min_length=6)
    ownerEmail: str
    ownerName: str = Field(min_length=1)


class UpdateDeveloperBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
