from sqlalchemy import Column, String, ForeignKey, DateTime, Integer, Numeric, Text, JSON, Enum as SQLEnum, text
from sqlalchemy.orm import relationship
import uuid
import enum
from app.db.base import Base


LOAN_TYPES = ("personal", "business", "education", "medical", "housing")


class LoanApplicationStatus(str, enum.Enum):
    """Loan application status."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LoanApplication(Base):
    """A member's loan request; once approved it also tracks repaid months."""
    __tablename__ = "loan_application"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    member_id = Column(String(20), ForeignKey("k_member.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)  # principal requested
    purpose = Column(Text, nullable=True)
    loan_type = Column(String(30), nullable=False, default="personal")
    repayment_period = Column(Integer, nullable=True)  # months, None means the unit default
    status = Column(SQLEnum(LoanApplicationStatus, native_enum=False, values_callable=lambda obj: [e.value for e in obj]), default=LoanApplicationStatus.PENDING, nullable=False)
    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    paid_months = Column(JSON, nullable=False, default=list)  # 1-based month numbers
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    # Relationships
    member = relationship("KMember")
