from pydantic import BaseModel, field_validator


# -------------------------------------------------
# Named lookup values (units, equipment categories and
# locations, document categories). Rows are keyed by
# (enterprise_id, name); renames cascade to the rows using them.
# -------------------------------------------------
class NamedItemCreate(BaseModel):
    name: str

    @field_validator("name")
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class NamedItemRename(BaseModel):
    new_name: str

    @field_validator("new_name")
    def strip_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("new_name cannot be empty")
        return v
