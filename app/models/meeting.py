from sqlalchemy import Column, String, ForeignKey, DateTime, Boolean, Text, JSON, text
from sqlalchemy.orm import relationship
import uuid
from app.db.base import Base


class Meeting(Base):
    """A scheduled unit meeting. Attendance can be marked while attendance_open is set."""
    __tablename__ = "meeting"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    unit_number = Column(String(20), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    venue = Column(String(200), nullable=True)
    date = Column(DateTime, nullable=False)
    attendance_open = Column(Boolean, default=True, nullable=False)
    summary = Column(Text, nullable=True)
    created_by = Column(String(20), nullable=True)  # phone of the president who scheduled it
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    # Relationships
    attendance_sheet = relationship("AttendanceSheet", back_populates="meeting", uselist=False)


class AttendanceSheet(Base):
    """Attendance of one meeting. members maps member id to {present, marked_by, marked_at}."""
    __tablename__ = "attendance_sheet"

    meeting_id = Column(String(36), ForeignKey("meeting.id"), primary_key=True)
    unit_number = Column(String(20), nullable=True)
    members = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime, nullable=True)

    # Relationships
    meeting = relationship("Meeting", back_populates="attendance_sheet")
