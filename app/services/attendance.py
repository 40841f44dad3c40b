import logging
from datetime import datetime
from sqlalchemy.orm import Session
from app.aggregation import attendance
from app.core.audit import write_audit_log
from app.core.errors import RecordNotFound
from app.models.meeting import AttendanceSheet, Meeting
from app.schemas.attendance import AttendanceCounts, AttendanceEntry, AttendanceRecord
from app.services.member import get_unit_roster
from typing import List, Tuple

logger = logging.getLogger(__name__)


def get_meeting(
    db: Session,
    meeting_id: str
) -> Meeting:
    meeting = db.query(Meeting).filter(Meeting.id == meeting_id).first()
    if not meeting:
        raise RecordNotFound("Meeting not found")
    return meeting


def schedule_meeting(
    db: Session,
    unit_number: str,
    title: str,
    venue: str,
    date: datetime,
    description: str = None,
    created_by: str = None
) -> Meeting:
    """Create a meeting for a unit. Attendance marking starts open."""
    if not title or not title.strip():
        raise ValueError("Please enter a meeting title")
    if not venue or not venue.strip():
        raise ValueError("Please enter a meeting venue")

    meeting = Meeting(
        unit_number=unit_number,
        title=title.strip(),
        venue=venue.strip(),
        date=date,
        description=(description or "").strip() or None,
        attendance_open=True,
        created_by=created_by,
    )
    db.add(meeting)
    db.commit()
    db.refresh(meeting)
    logger.info("Meeting %s scheduled for unit %s on %s", meeting.id, unit_number, date)
    return meeting


def get_unit_meetings(
    db: Session,
    unit_number: str
) -> List[Meeting]:
    """Meetings of a unit, latest first."""
    return db.query(Meeting).filter(
        Meeting.unit_number == unit_number
    ).order_by(Meeting.date.desc()).all()


def _to_record(meeting_id: str, sheet: AttendanceSheet) -> AttendanceRecord:
    return AttendanceRecord(meeting_id=meeting_id, members=sheet.members or {})


def _dump_members(members) -> dict:
    return {member_id: entry.model_dump(mode="json") for member_id, entry in members.items()}


def open_sheet(
    db: Session,
    meeting_id: str,
    now: datetime = None
) -> Tuple[Meeting, AttendanceRecord]:
    """
    Load the attendance sheet of a meeting, adding any roster member who is
    not on it yet as absent. Creates the sheet on first use.
    """
    now = now or datetime.utcnow()
    meeting = get_meeting(db, meeting_id)

    roster = get_unit_roster(db, meeting.unit_number)
    if not roster:
        raise ValueError("No members found in this unit")

    sheet = meeting.attendance_sheet
    if sheet is None:
        sheet = AttendanceSheet(
            unit_number=meeting.unit_number,
            members={},
            updated_at=now,
        )
        meeting.attendance_sheet = sheet

    record = _to_record(meeting.id, sheet)
    merged = attendance.initialize(roster, record.members, now)

    if len(merged) != len(record.members):
        added = len(merged) - len(record.members)
        sheet.members = _dump_members(merged)
        sheet.updated_at = now
        db.commit()
        db.refresh(sheet)
        logger.info("Attendance sheet for meeting %s: added %d member(s)", meeting.id, added)

    return meeting, AttendanceRecord(meeting_id=meeting.id, members=merged)


def toggle_attendance(
    db: Session,
    meeting_id: str,
    member_id: str,
    acting_user_id: str,
    now: datetime = None
) -> Tuple[AttendanceEntry, AttendanceRecord]:
    """
    Flip a member's presence and store the new entry. Only that member's
    entry is rewritten; the previous value is kept in the audit log only.
    """
    now = now or datetime.utcnow()
    meeting, record = open_sheet(db, meeting_id, now)

    entry = attendance.toggle(record, member_id, acting_user_id, meeting.attendance_open, now)

    sheet = meeting.attendance_sheet
    members = dict(sheet.members or {})
    members[member_id] = entry.model_dump(mode="json")
    sheet.members = members
    sheet.updated_at = now
    db.commit()

    record.members[member_id] = entry
    logger.info("Meeting %s: %s marked %s by %s", meeting.id, member_id,
                "present" if entry.present else "absent", acting_user_id)
    write_audit_log(acting_user_id, "president", "toggle_attendance",
                    f"meeting={meeting.id} member={member_id} present={entry.present}")
    return entry, record


def set_attendance_open(
    db: Session,
    meeting_id: str,
    is_open: bool
) -> Meeting:
    """Open or close attendance marking for a meeting."""
    meeting = get_meeting(db, meeting_id)
    meeting.attendance_open = is_open
    db.commit()
    db.refresh(meeting)
    logger.info("Attendance for meeting %s is now %s", meeting.id, "open" if is_open else "closed")
    return meeting


def get_attendance_counts(
    db: Session,
    meeting_id: str
) -> AttendanceCounts:
    """Present/absent counts of the stored sheet (empty if none was opened)."""
    meeting = get_meeting(db, meeting_id)
    sheet = meeting.attendance_sheet
    if sheet is None:
        return AttendanceCounts(present_count=0, absent_count=0, total=0)
    return attendance.counts(_to_record(meeting.id, sheet))


def save_summary(
    db: Session,
    meeting_id: str,
    summary: str
) -> Meeting:
    meeting = get_meeting(db, meeting_id)
    meeting.summary = summary.strip()
    db.commit()
    db.refresh(meeting)
    return meeting
