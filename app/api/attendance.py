from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.base import get_db
from app.core.dependencies import require_president
from app.core.errors import AttendanceClosed, RecordNotFound, UnknownMember
from app.aggregation import attendance
from app.models.member import KMember
from app.schemas.attendance import (
    AttendanceCounts,
    AttendanceSheetResponse,
    AttendanceStatusUpdate,
    MeetingSummaryUpdate,
    ToggleResponse,
)
from app.services.attendance import (
    get_attendance_counts,
    get_meeting,
    open_sheet,
    save_summary,
    set_attendance_open,
    toggle_attendance,
)

router = APIRouter(prefix="/api/attendance", tags=["attendance"])


def _check_unit(db: Session, meeting_id: str, president: KMember):
    meeting = get_meeting(db, meeting_id)
    if meeting.unit_number != president.unit_number:
        raise HTTPException(status_code=403, detail="Meeting belongs to another unit")
    return meeting


@router.post("/{meeting_id}/open", response_model=AttendanceSheetResponse)
def open_attendance_sheet(
    meeting_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Load the meeting's attendance sheet, adding new unit members as absent."""
    try:
        _check_unit(db, meeting_id, current_member)
        meeting, record = open_sheet(db, meeting_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    counts = attendance.counts(record)
    return AttendanceSheetResponse(
        meeting_id=meeting.id,
        attendance_open=meeting.attendance_open,
        members=record.members,
        counts=counts,
        attendance_percent=attendance.attendance_percent(counts),
    )


@router.post("/{meeting_id}/members/{member_id}/toggle", response_model=ToggleResponse)
def toggle_member_attendance(
    meeting_id: str,
    member_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Mark a member present if absent, absent if present."""
    try:
        _check_unit(db, meeting_id, current_member)
        entry, record = toggle_attendance(db, meeting_id, member_id, acting_user_id=current_member.phone)
    except AttendanceClosed as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (RecordNotFound, UnknownMember) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ToggleResponse(
        meeting_id=meeting_id,
        member_id=member_id,
        entry=entry,
        counts=attendance.counts(record),
    )


@router.put("/{meeting_id}/status")
def update_attendance_status(
    meeting_id: str,
    payload: AttendanceStatusUpdate,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Open or close attendance marking."""
    try:
        _check_unit(db, meeting_id, current_member)
        meeting = set_attendance_open(db, meeting_id, payload.attendance_open)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"meeting_id": meeting.id, "attendance_open": meeting.attendance_open}


@router.get("/{meeting_id}/counts", response_model=AttendanceCounts)
def get_counts(
    meeting_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    try:
        _check_unit(db, meeting_id, current_member)
        return get_attendance_counts(db, meeting_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{meeting_id}/summary")
def update_meeting_summary(
    meeting_id: str,
    payload: MeetingSummaryUpdate,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Save the minutes of a meeting."""
    try:
        _check_unit(db, meeting_id, current_member)
        meeting = save_summary(db, meeting_id, payload.summary)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"meeting_id": meeting.id, "summary": meeting.summary}
