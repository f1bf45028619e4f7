from typing import Optional
from pydantic import BaseModel, Field, computed_field, field_validator


# -------------------------------------------------
# Create Reading
# -------------------------------------------------
class WaterReadingCreate(BaseModel):
    """
    The client sends the meter value only; previous_reading is
    looked up from the unit's latest reading.
    """
    unit: str
    date: str = Field(..., description="ISO date or datetime of the reading")
    reading: float = Field(..., ge=0, description="Meter value in m³")


class WaterReadingUpdate(BaseModel):
    date: Optional[str] = None
    reading: Optional[float] = Field(None, ge=0)


# -------------------------------------------------
# Read Reading
# -------------------------------------------------
class WaterReadingRead(BaseModel):
    id: str
    enterprise_id: str
    unit: str
    date: str
    reading: float
    previous_reading: Optional[float] = None

    @field_validator("id", "enterprise_id", mode="before")
    def id_to_str(cls, v):
        return str(v)

    @computed_field
    @property
    def consumption(self) -> float:
        if self.previous_reading is None:
            return 0.0
        return self.reading - self.previous_reading
