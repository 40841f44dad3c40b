from app.db.base import Base

# Import all models so create_all() sees every table
from app.models.member import KMember, MemberRole, MemberStatus
from app.models.loan import LoanApplication, LoanApplicationStatus
from app.models.savings import WeeklyDuePayment, WeeklyDueSettings
from app.models.meeting import Meeting, AttendanceSheet

__all__ = [
    "Base",
    "KMember",
    "MemberRole",
    "MemberStatus",
    "LoanApplication",
    "LoanApplicationStatus",
    "WeeklyDuePayment",
    "WeeklyDueSettings",
    "Meeting",
    "AttendanceSheet",
]
