from datetime import datetime

import pytest

from app.aggregation import attendance
from app.core.errors import AttendanceClosed, UnknownMember
from app.schemas.attendance import AttendanceEntry, AttendanceRecord, MemberRosterEntry

NOW = datetime(2025, 4, 6, 10, 0)
LATER = datetime(2025, 4, 6, 10, 5)


def roster_of(*ids):
    return [MemberRosterEntry(id=i, name=f"Member {i}", phone=i, unit_number="12") for i in ids]


def test_fresh_sheet_then_one_toggle():
    record = AttendanceRecord(meeting_id="m1", members={})
    record.members = attendance.initialize(roster_of("A", "B"), record.members, NOW)

    assert attendance.counts(record).model_dump() == {"present_count": 0, "absent_count": 2, "total": 2}

    entry = attendance.toggle(record, "A", "9000000001", now=LATER)
    record.members["A"] = entry

    assert attendance.counts(record).model_dump() == {"present_count": 1, "absent_count": 1, "total": 2}
    assert entry == AttendanceEntry(present=True, marked_by="9000000001", marked_at=LATER)


def test_initialize_keeps_existing_entries():
    existing = {"A": AttendanceEntry(present=True, marked_by="9000000001", marked_at=NOW)}

    merged = attendance.initialize(roster_of("A", "B"), existing, LATER)

    assert merged["A"] == existing["A"]
    assert merged["B"] == AttendanceEntry(present=False, marked_by="", marked_at=LATER)
    assert list(existing) == ["A"]


def test_initialize_is_idempotent():
    roster = roster_of("A", "B", "C")
    once = attendance.initialize(roster, {}, NOW)
    twice = attendance.initialize(roster, once, LATER)
    assert twice == once


def test_members_no_longer_on_roster_are_kept():
    existing = {"Z": AttendanceEntry(present=True, marked_by="x", marked_at=NOW)}
    merged = attendance.initialize(roster_of("A"), existing, NOW)
    assert set(merged) == {"A", "Z"}


def test_toggle_twice_returns_to_absent():
    record = AttendanceRecord(meeting_id="m1", members=attendance.initialize(roster_of("A"), {}, NOW))

    record.members["A"] = attendance.toggle(record, "A", "p1", now=NOW)
    record.members["A"] = attendance.toggle(record, "A", "p2", now=LATER)

    assert record.members["A"].present is False
    assert record.members["A"].marked_by == "p2"
    assert record.members["A"].marked_at == LATER


def test_toggle_does_not_modify_record():
    record = AttendanceRecord(meeting_id="m1", members=attendance.initialize(roster_of("A"), {}, NOW))
    attendance.toggle(record, "A", "p1", now=LATER)
    assert record.members["A"].present is False


def test_toggle_unknown_member():
    record = AttendanceRecord(meeting_id="m1", members=attendance.initialize(roster_of("A"), {}, NOW))
    with pytest.raises(UnknownMember):
        attendance.toggle(record, "B", "p1")


def test_toggle_when_attendance_closed():
    record = AttendanceRecord(meeting_id="m1", members=attendance.initialize(roster_of("A"), {}, NOW))
    with pytest.raises(AttendanceClosed):
        attendance.toggle(record, "A", "p1", attendance_open=False)


def test_counts_always_add_up():
    members = {
        str(i): AttendanceEntry(present=i % 3 == 0, marked_by="", marked_at=NOW)
        for i in range(10)
    }
    counts = attendance.counts(AttendanceRecord(meeting_id="m1", members=members))

    assert counts.present_count == 4
    assert counts.present_count + counts.absent_count == counts.total == 10


def test_attendance_percent():
    record = AttendanceRecord(meeting_id="m1", members={})
    assert attendance.attendance_percent(attendance.counts(record)) == 0.0

    record.members = {
        "A": AttendanceEntry(present=True, marked_by="p", marked_at=NOW),
        "B": AttendanceEntry(present=False, marked_by="", marked_at=NOW),
    }
    assert attendance.attendance_percent(attendance.counts(record)) == 50.0
