from pydantic import BaseModel, Field
from typing import Dict
from datetime import datetime


class MemberRosterEntry(BaseModel):
    """Read-only roster snapshot used to seed attendance sheets."""
    id: str
    name: str
    phone: str
    unit_number: str


class AttendanceEntry(BaseModel):
    present: bool = False
    marked_by: str = ""
    marked_at: datetime


class AttendanceRecord(BaseModel):
    """Attendance of one meeting, keyed by member id. Re-marking overwrites."""
    meeting_id: str
    members: Dict[str, AttendanceEntry] = Field(default_factory=dict)


class AttendanceCounts(BaseModel):
    present_count: int
    absent_count: int
    total: int


class AttendanceSheetResponse(BaseModel):
    meeting_id: str
    attendance_open: bool
    members: Dict[str, AttendanceEntry]
    counts: AttendanceCounts
    attendance_percent: float


class AttendanceStatusUpdate(BaseModel):
    attendance_open: bool


class MeetingSummaryUpdate(BaseModel):
    summary: str = Field(..., description="Minutes of the meeting")


class ToggleResponse(BaseModel):
    meeting_id: str
    member_id: str
    entry: AttendanceEntry
    counts: AttendanceCounts
