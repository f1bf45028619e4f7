from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


# -------------------------------------------------
# Settings blob (enterprises.settings)
# -------------------------------------------------
class EnterpriseSettings(BaseModel):
    """
    Stored as JSON; keys keep the client's camelCase names.
    Unknown keys are preserved on write.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    water_limit: Optional[float] = Field(None, alias="waterLimit", ge=0)


# -------------------------------------------------
# Admin dashboard
# -------------------------------------------------
class DashboardStats(BaseModel):
    pending_tasks: int = 0
    water_readings: int = 0
    equipment_count: int = 0
    connected: bool = True


# -------------------------------------------------
# Audit log
# -------------------------------------------------
class AuditLogRead(BaseModel):
    id: str
    enterprise_id: str
    user_email: str
    action: str
    details: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)
