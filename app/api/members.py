from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.base import get_db
from app.core.dependencies import get_current_member, require_president
from app.core.errors import RecordNotFound
from app.models.member import KMember
from app.schemas.member import MemberProfileResponse, MemberRegistration, MembershipDaysResponse
from app.services.member import (
    approve_member,
    get_member,
    get_membership_days,
    get_pending_members,
    register_member,
    reject_member,
)
from typing import List

router = APIRouter(prefix="/api/members", tags=["members"])


def _get_unit_member(db: Session, member_id: str, president: KMember) -> KMember:
    member = get_member(db, member_id)
    if not member:
        raise HTTPException(status_code=404, detail="Member not found")
    if member.unit_number != president.unit_number:
        raise HTTPException(status_code=403, detail="Member belongs to another unit")
    return member


@router.post("/register", response_model=MemberProfileResponse)
def register(
    registration: MemberRegistration,
    db: Session = Depends(get_db)
):
    """Register as a K-member. The account stays pending until the president approves it."""
    try:
        return register_member(
            db,
            phone=registration.phone,
            first_name=registration.first_name,
            last_name=registration.last_name,
            unit_number=registration.unit_number,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/me", response_model=MemberProfileResponse)
def get_my_profile(
    current_member: KMember = Depends(get_current_member)
):
    return current_member


@router.get("/me/membership-days", response_model=MembershipDaysResponse)
def get_my_membership_days(
    current_member: KMember = Depends(get_current_member),
    db: Session = Depends(get_db)
):
    """How many days I have been a member of my unit."""
    return MembershipDaysResponse(
        member_id=current_member.id,
        joined_at=current_member.joined_at,
        days=get_membership_days(db, current_member.id),
    )


@router.get("/pending", response_model=List[MemberProfileResponse])
def list_pending_members(
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Registrations waiting for approval in the president's unit."""
    return get_pending_members(db, current_member.unit_number)


@router.post("/{member_id}/approve", response_model=MemberProfileResponse)
def approve_member_registration(
    member_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Approve a pending K-member of the president's unit."""
    member = _get_unit_member(db, member_id, current_member)
    try:
        return approve_member(db, member.id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{member_id}/reject", response_model=MemberProfileResponse)
def reject_member_registration(
    member_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Reject a pending K-member of the president's unit."""
    member = _get_unit_member(db, member_id, current_member)
    try:
        return reject_member(db, member.id, rejected_by=current_member.id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
