from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class MeetingCreate(BaseModel):
    """Schema for scheduling a unit meeting."""
    title: str = Field(..., description="Meeting title")
    venue: str = Field(..., description="Where the meeting takes place")
    date: datetime = Field(..., description="Date and time of the meeting")
    description: Optional[str] = Field(None, description="Agenda or notes for members")


class MeetingResponse(BaseModel):
    id: str
    unit_number: str
    title: str
    description: Optional[str] = None
    venue: Optional[str] = None
    date: datetime
    attendance_open: bool
    summary: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
