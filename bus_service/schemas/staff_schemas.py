from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from bus_service.models import StaffPositionEnum, StaffStatusEnum

# --- Staff Schemas ---

class StaffCreate(BaseModel):
    """Schema for creating a new Staff member."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    position: StaffPositionEnum
    license_no: Optional[str] = Field(None, max_length=50)

class StaffUpdate(StaffCreate):
    """
    Full replacement of a Staff member.
    license_no is cleared when omitted; status is kept when omitted.
    """
    status: Optional[StaffStatusEnum] = None

class StaffRead(BaseModel):
    """Schema for reading Staff data."""
    id: int
    name: str
    email: str
    phone: str
    position: str
    license_no: Optional[str]
    status: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class StaffListResponse(BaseModel):
    staff: List[StaffRead]
    count: int
