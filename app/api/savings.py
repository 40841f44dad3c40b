from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from app.db.base import get_db
from app.core.dependencies import get_current_approved_member, require_president
from app.core.errors import ConfigMissing, RecordNotFound
from app.models.member import KMember
from app.schemas.savings import (
    MemberDuesReport,
    SavingsOverview,
    WeeklyDue,
    WeeklyDuePaymentResponse,
    WeeklyDueSettingsResponse,
    WeeklyDueSettingsUpdate,
)
from app.services.savings import (
    get_dues_report,
    get_savings_overview,
    get_weekly_schedule,
    pay_weekly_due,
    set_weekly_amount,
)
from typing import List

router = APIRouter(prefix="/api/savings", tags=["savings"])


@router.get("/me", response_model=SavingsOverview)
def get_my_savings(
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """My savings, monthly breakdown and my unit's collective savings."""
    return get_savings_overview(db, current_member.id)


@router.get("/me/weekly-dues", response_model=List[WeeklyDue])
def get_my_weekly_dues(
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """Every week since I joined, with its payment status."""
    try:
        return get_weekly_schedule(db, current_member.id)
    except ConfigMissing as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/me/weekly-dues/{week_number}/pay", response_model=WeeklyDuePaymentResponse)
def pay_my_weekly_due(
    week_number: int,
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    try:
        return pay_weekly_due(db, current_member.id, week_number)
    except ConfigMissing as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.put("/settings", response_model=WeeklyDueSettingsResponse)
def update_weekly_due_settings(
    payload: WeeklyDueSettingsUpdate,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Set the weekly due amount for the unit (president only)."""
    return set_weekly_amount(db, payload.amount, payload.description, updated_by=current_member.id)


@router.get("/report", response_model=List[MemberDuesReport])
def get_unit_dues_report(
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Weekly dues owed and paid by each member of the president's unit."""
    return get_dues_report(db, current_member.unit_number)
