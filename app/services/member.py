from datetime import datetime
from sqlalchemy.orm import Session
from app.aggregation import membership
from app.core.audit import write_audit_log
from app.core.config import settings
from app.core.errors import RecordNotFound
from app.models.member import KMember, MemberRole, MemberStatus
from app.schemas.attendance import MemberRosterEntry
from typing import List, Optional


def get_member(
    db: Session,
    member_id: str
) -> Optional[KMember]:
    """Get a member by id (phone number without +91)."""
    return db.query(KMember).filter(KMember.id == normalize_member_id(member_id)).first()


def normalize_member_id(phone: str) -> str:
    """Member documents are keyed by the 10-digit number, without the +91 prefix."""
    phone = (phone or "").strip()
    if phone.startswith("+91"):
        phone = phone[3:]
    return phone


def get_unit_members(
    db: Session,
    unit_number: str
) -> List[KMember]:
    """Approved members of a unit."""
    return db.query(KMember).filter(
        KMember.unit_number == unit_number,
        KMember.status == MemberStatus.APPROVED
    ).order_by(KMember.first_name).all()


def get_unit_roster(
    db: Session,
    unit_number: str
) -> List[MemberRosterEntry]:
    """Roster snapshot of the approved members of a unit."""
    return [
        MemberRosterEntry(
            id=member.id,
            name=member.full_name,
            phone=member.phone,
            unit_number=member.unit_number,
        )
        for member in get_unit_members(db, unit_number)
    ]


def approve_member(
    db: Session,
    member_id: str,
    approved_at: datetime = None
) -> KMember:
    """Approve a pending registration. The approval time becomes the join date."""
    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")

    if member.status == MemberStatus.APPROVED:
        return member  # Already approved

    member.status = MemberStatus.APPROVED
    if member.joined_at is None:
        member.joined_at = approved_at or datetime.utcnow()

    db.commit()
    db.refresh(member)
    return member


def get_pending_members(
    db: Session,
    unit_number: str
) -> List[KMember]:
    """Registrations of a unit waiting for the president's decision, oldest first."""
    return db.query(KMember).filter(
        KMember.unit_number == unit_number,
        KMember.status == MemberStatus.PENDING
    ).order_by(KMember.created_at).all()


def register_member(
    db: Session,
    phone: str,
    first_name: str,
    unit_number: str,
    last_name: str = None
) -> KMember:
    """Create a pending K-member. The president approves or rejects it later."""
    member_id = normalize_member_id(phone)
    if len(member_id) != 10 or not member_id.isdigit():
        raise ValueError("Phone number must have 10 digits")
    if not first_name or not first_name.strip():
        raise ValueError("First name is required")
    if not unit_number or not unit_number.strip():
        raise ValueError("Unit number is required")

    if get_member(db, member_id):
        raise ValueError(f"Phone number {member_id} is already registered")

    member = KMember(
        id=member_id,
        phone=member_id,
        first_name=first_name.strip(),
        last_name=(last_name or "").strip() or None,
        unit_number=unit_number.strip(),
        role=MemberRole.K_MEMBER,
        status=MemberStatus.PENDING,
    )
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def reject_member(
    db: Session,
    member_id: str,
    rejected_by: str
) -> KMember:
    """Reject a pending registration. Approved members cannot be rejected."""
    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")

    if member.status == MemberStatus.REJECTED:
        return member  # Already rejected
    if member.status != MemberStatus.PENDING:
        raise ValueError("Only pending registrations can be rejected")

    member.status = MemberStatus.REJECTED
    db.commit()
    db.refresh(member)
    write_audit_log(rejected_by, "president", "reject_member", f"member={member.id}")
    return member


def get_membership_days(
    db: Session,
    member_id: str,
    now: datetime = None
) -> int:
    """Days since the member joined, counted from the unit's fallback date when unknown."""
    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")

    return membership.days_since(
        member.joined_at,
        settings.MEMBERSHIP_FALLBACK_EPOCH,
        now or datetime.utcnow(),
    )
