from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from .enums import StructuralPriority, StructuralStatus


# -------------------------------------------------
# Shared Fields
# -------------------------------------------------
class StructuralIssueBase(BaseModel):
    title: str
    description: Optional[str] = None
    location: str
    priority: StructuralPriority = StructuralPriority.medium
    notify_admin: bool = True


# -------------------------------------------------
# Create Issue
# -------------------------------------------------
class StructuralIssueCreate(StructuralIssueBase):
    """
    reported_by and status are set by the backend.
    Photos are inserted after the issue, as a separate call.
    """
    photos: List[str] = Field(default_factory=list)


class StructuralIssueUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    priority: Optional[StructuralPriority] = None
    status: Optional[StructuralStatus] = None
    notify_admin: Optional[bool] = None


class StructuralStatusUpdate(BaseModel):
    status: StructuralStatus


# -------------------------------------------------
# Read Issue
# -------------------------------------------------
class StructuralIssueRead(StructuralIssueBase):
    id: str
    enterprise_id: str
    status: StructuralStatus
    reported_by: str
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    cover_photo: Optional[str] = None

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)

    @field_validator("notify_admin", mode="before")
    def default_notify(cls, v):
        return True if v is None else v

    @classmethod
    def from_row(cls, row: dict) -> "StructuralIssueRead":
        data = {k: v for k, v in row.items() if k != "structural_photos"}
        photos = row.get("structural_photos") or []
        if photos:
            data["cover_photo"] = photos[0].get("url")
        return cls(**data)


# -------------------------------------------------
# Photos
# -------------------------------------------------
class StructuralPhotoCreate(BaseModel):
    url: str


class StructuralPhotoRead(StructuralPhotoCreate):
    id: str
    issue_id: str

    @field_validator("id", "issue_id", mode="before")
    def id_to_str(cls, v):
        return str(v)
