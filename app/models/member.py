from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, text
import enum
from app.db.base import Base


class MemberRole(str, enum.Enum):
    """Role of a member within the unit."""
    PRESIDENT = "president"
    K_MEMBER = "k_member"


class MemberStatus(str, enum.Enum):
    """Approval status of a K-member registration."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class KMember(Base):
    """A registered member of a Kudumbashree unit. The id is the phone number without country code."""
    __tablename__ = "k_member"

    id = Column(String(20), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=False, unique=True, index=True)
    unit_number = Column(String(20), nullable=False, index=True)
    role = Column(SQLEnum(MemberRole, native_enum=False, values_callable=lambda obj: [e.value for e in obj]), default=MemberRole.K_MEMBER, nullable=False)
    status = Column(SQLEnum(MemberStatus, native_enum=False, values_callable=lambda obj: [e.value for e in obj]), default=MemberStatus.PENDING, nullable=False)
    joined_at = Column(DateTime, nullable=True)  # set on approval; older members may not have it
    created_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()
