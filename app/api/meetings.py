from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.base import get_db
from app.core.dependencies import get_current_approved_member, require_president
from app.models.member import KMember
from app.schemas.meeting import MeetingCreate, MeetingResponse
from app.services.attendance import get_unit_meetings, schedule_meeting
from typing import List

router = APIRouter(prefix="/api/meetings", tags=["meetings"])


@router.post("", response_model=MeetingResponse)
def create_meeting(
    meeting: MeetingCreate,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Schedule a meeting for the president's unit."""
    try:
        return schedule_meeting(
            db,
            unit_number=current_member.unit_number,
            title=meeting.title,
            venue=meeting.venue,
            date=meeting.date,
            description=meeting.description,
            created_by=current_member.phone,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[MeetingResponse])
def list_meetings(
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """Meetings of my unit, latest first."""
    return get_unit_meetings(db, current_member.unit_number)
