from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .enums import CommentContentType, TaskStatus


MAX_TASK_ATTACHMENTS = 5


# -------------------------------------------------
# Shared Fields
# -------------------------------------------------
class TaskBase(BaseModel):
    title: str
    description: Optional[str] = None
    # Base64 audio recorded by the client
    audio_description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    due_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    notify_assignee: bool = True


# -------------------------------------------------
# Create Task
# -------------------------------------------------
class TaskCreate(TaskBase):
    """
    Member email, or a custom assignee name.
    Omitted → the caller (the only choice below FULL_ACCESS).
    """
    assigned_to: Optional[str] = None

    @field_validator("assigned_to", mode="before")
    def normalize_assignee(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        if not v:
            return None
        # Member emails are stored lower-cased; custom names keep their casing
        return v.lower() if "@" in v else v


# -------------------------------------------------
# Update Task (partial)
# -------------------------------------------------
class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    audio_description: Optional[str] = None
    assigned_to: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[str] = None
    notify_assignee: Optional[bool] = None

    @field_validator("assigned_to", mode="before")
    def normalize_assignee(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        if not v:
            return None
        return v.lower() if "@" in v else v


# -------------------------------------------------
# Read Task
# -------------------------------------------------
class TaskRead(TaskBase):
    id: str
    enterprise_id: str
    enterprise_name: Optional[str] = None  # unified (cross-enterprise) view
    assigned_to: str
    created_at: Optional[datetime] = None

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)

    @field_validator("notify_assignee", mode="before")
    def default_notify(cls, v):
        return True if v is None else v

    @classmethod
    def from_row(cls, row: dict) -> "TaskRead":
        data = {k: v for k, v in row.items() if k != "enterprises"}
        enterprise = row.get("enterprises")
        if isinstance(enterprise, dict):
            data["enterprise_name"] = enterprise.get("name")
        return cls(**data)


# -------------------------------------------------
# Comments / Attachments
# -------------------------------------------------
class TaskCommentCreate(BaseModel):
    content: str
    content_type: CommentContentType = CommentContentType.text


class TaskCommentRead(TaskCommentCreate):
    id: str
    task_id: str
    user_email: str
    user_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("id", "task_id", mode="before")
    def id_to_str(cls, v):
        return str(v)


class TaskAttachmentCreate(BaseModel):
    url: str  # base64 image from the client


class TaskAttachmentRead(BaseModel):
    id: str
    task_id: str
    type: str = "IMAGE"
    url: str
    created_at: Optional[datetime] = None

    @field_validator("id", "task_id", mode="before")
    def id_to_str(cls, v):
        return str(v)


# -------------------------------------------------
# Assignees (members + custom names)
# -------------------------------------------------
class Assignee(BaseModel):
    id: str      # email for members, the name itself for custom assignees
    name: str
    type: str    # "USER" | "CUSTOM"


class CustomAssigneeCreate(BaseModel):
    name: str
