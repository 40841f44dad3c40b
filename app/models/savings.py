from sqlalchemy import Column, String, ForeignKey, DateTime, Numeric, Text, JSON
from app.db.base import Base

WEEKLY_DUE_SETTINGS_ID = "config"


class WeeklyDuePayment(Base):
    """Weekly dues paid by one member. paid_dates maps week number (as text) to an ISO timestamp."""
    __tablename__ = "weekly_due_payment"

    member_id = Column(String(20), ForeignKey("k_member.id"), primary_key=True)
    paid_weeks = Column(JSON, nullable=False, default=list)  # in payment order
    paid_dates = Column(JSON, nullable=False, default=dict)
    last_updated = Column(DateTime, nullable=True)


class WeeklyDueSettings(Base):
    """Unit-wide weekly due amount. Single row with id 'config'."""
    __tablename__ = "weekly_due_settings"

    id = Column(String(20), primary_key=True, default=WEEKLY_DUE_SETTINGS_ID)
    amount = Column(Numeric(10, 2), nullable=True)
    description = Column(Text, nullable=True)
    updated_at = Column(DateTime, nullable=True)
