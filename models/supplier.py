from typing import Optional
from pydantic import BaseModel, Field, field_validator


class SupplierBase(BaseModel):
    name: str
    service_type: str
    contact: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(BaseModel):
    name: Optional[str] = None
    service_type: Optional[str] = None
    contact: Optional[str] = None
    rating: Optional[float] = Field(None, ge=0, le=5)


class SupplierRead(SupplierBase):
    id: str
    enterprise_id: str

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)
