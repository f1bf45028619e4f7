from datetime import datetime
from typing import Optional
from pydantic import BaseModel, field_validator

from .enums import EquipmentStatus, MaintenanceType


# -------------------------------------------------
# Shared Fields
# -------------------------------------------------
class EquipmentBase(BaseModel):
    name: str
    category: str
    location: str
    description: Optional[str] = None
    acquisition_date: Optional[str] = None
    install_date: Optional[str] = None
    last_maintenance: Optional[str] = None
    next_maintenance: Optional[str] = None
    status: EquipmentStatus = EquipmentStatus.operational


class EquipmentCreate(EquipmentBase):
    pass


class EquipmentUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    acquisition_date: Optional[str] = None
    install_date: Optional[str] = None
    next_maintenance: Optional[str] = None
    status: Optional[EquipmentStatus] = None


class EquipmentRead(EquipmentBase):
    id: str
    enterprise_id: str
    qr_code_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)


# -------------------------------------------------
# Images
# -------------------------------------------------
class EquipmentImageCreate(BaseModel):
    url: str


class EquipmentImageRead(EquipmentImageCreate):
    id: str
    equipment_id: str
    created_at: Optional[datetime] = None

    @field_validator("id", "equipment_id", mode="before")
    def id_to_str(cls, v):
        return str(v)


# -------------------------------------------------
# Maintenance history
# -------------------------------------------------
class MaintenanceLogBase(BaseModel):
    date: str
    technician: str
    description: Optional[str] = None
    type: MaintenanceType = MaintenanceType.preventive
    # Base64 signature captured on site
    signature_url: Optional[str] = None


class MaintenanceLogCreate(MaintenanceLogBase):
    pass


class MaintenanceLogUpdate(BaseModel):
    date: Optional[str] = None
    technician: Optional[str] = None
    description: Optional[str] = None
    type: Optional[MaintenanceType] = None
    signature_url: Optional[str] = None


class MaintenanceLogRead(MaintenanceLogBase):
    id: str
    equipment_id: str

    @field_validator("id", "equipment_id", mode="before")
    def id_to_str(cls, v):
        return str(v)
