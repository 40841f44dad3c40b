from datetime import datetime
from typing import Dict, Iterable, Optional

from app.core.errors import AttendanceClosed, UnknownMember
from app.schemas.attendance import AttendanceCounts, AttendanceEntry, AttendanceRecord, MemberRosterEntry


def _now() -> datetime:
    return datetime.utcnow()


def initialize(
    roster: Iterable[MemberRosterEntry],
    members: Dict[str, AttendanceEntry],
    now: Optional[datetime] = None,
) -> Dict[str, AttendanceEntry]:
    """
    Add an absent entry for every roster member missing from ``members``.

    Existing entries are never touched, so running this again on its own
    output changes nothing. ``members`` itself is not modified.
    """
    now = now or _now()
    merged = dict(members)
    for member in roster:
        if member.id not in merged:
            merged[member.id] = AttendanceEntry(present=False, marked_by="", marked_at=now)
    return merged


def toggle(
    record: AttendanceRecord,
    member_id: str,
    acting_user_id: str,
    attendance_open: bool = True,
    now: Optional[datetime] = None,
) -> AttendanceEntry:
    """New entry for ``member_id`` with presence flipped; the caller stores it."""
    if not attendance_open:
        raise AttendanceClosed(record.meeting_id)
    current = record.members.get(member_id)
    if current is None:
        raise UnknownMember(member_id)

    return AttendanceEntry(
        present=not current.present,
        marked_by=acting_user_id,
        marked_at=now or _now(),
    )


def counts(record: AttendanceRecord) -> AttendanceCounts:
    total = len(record.members)
    present_count = sum(1 for entry in record.members.values() if entry.present)
    return AttendanceCounts(
        present_count=present_count,
        absent_count=total - present_count,
        total=total,
    )


def attendance_percent(summary: AttendanceCounts) -> float:
    if summary.total == 0:
        return 0.0
    return 100.0 * summary.present_count / summary.total
