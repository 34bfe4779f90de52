from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from bus_service.models import BusStatusEnum

# --- Bus Schemas ---

class BusCreate(BaseModel):
    """Schema for creating a new Bus. Status always starts as active."""
    plate_number: str = Field(..., min_length=1, max_length=20)
    model: str = Field(..., min_length=1, max_length=100)
    capacity: int = Field(..., ge=1)

class BusUpdate(BusCreate):
    """Full replacement of a Bus. Omitting status keeps the current one."""
    status: Optional[BusStatusEnum] = None

class BusRead(BaseModel):
    """Schema for reading Bus data."""
    id: int
    plate_number: str
    model: str
    capacity: int
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class BusListResponse(BaseModel):
    buses: List[BusRead]
    count: int
