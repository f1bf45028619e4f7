from typing import Optional
from pydantic import BaseModel, Field, field_validator


# -------------------------------------------------
# Shared Fields
# -------------------------------------------------
class DocumentBase(BaseModel):
    title: str
    category: str
    date: str = Field(..., description="Document date (YYYY-MM-DD)")


# -------------------------------------------------
# Create Document
# -------------------------------------------------
class DocumentCreate(DocumentBase):
    """
    The client uploads the file as a data URL (base64).
    file_type is derived from the MIME type when omitted.
    """
    url: str
    file_type: Optional[str] = None


class DocumentUpdate(BaseModel):
    title: Optional[str] = None
    category: Optional[str] = None
    date: Optional[str] = None


class DocumentRead(DocumentBase):
    id: str
    enterprise_id: str
    url: str
    file_type: Optional[str] = None

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)


def file_type_from_data_url(url: str) -> str:
    """'data:application/pdf;base64,...' → 'PDF'."""
    if url and url.startswith("data:") and "/" in url:
        mime = url[5:].split(";", 1)[0]
        subtype = mime.split("/", 1)[-1]
        if subtype:
            return subtype.upper()
    return "FILE"
