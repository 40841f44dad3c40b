from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from app.models.member import MemberRole, MemberStatus


class MemberRegistration(BaseModel):
    """Schema for a K-member registering with their unit."""
    phone: str = Field(..., description="Mobile number, with or without the +91 prefix")
    first_name: str = Field(..., min_length=1)
    last_name: Optional[str] = None
    unit_number: str = Field(..., min_length=1, description="Unit the member belongs to")


class MemberProfileResponse(BaseModel):
    id: str
    first_name: str
    last_name: Optional[str] = None
    phone: str
    unit_number: str
    role: MemberRole
    status: MemberStatus
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MembershipDaysResponse(BaseModel):
    member_id: str
    joined_at: Optional[datetime] = None
    days: int
