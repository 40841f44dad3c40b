from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.db.base import get_db
from app.core.dependencies import get_current_approved_member, require_president
from app.core.errors import InvalidLoanTerm, RecordNotFound
from app.models.member import KMember, MemberRole
from app.schemas.loan import (
    LoanApplicationCreate,
    LoanApplicationResponse,
    LoanOverviewResponse,
    LoanPaymentResponse,
)
from app.services.loan import (
    apply_for_loan,
    approve_loan,
    get_loan,
    get_loan_overview,
    get_member_loans,
    get_pending_loans,
    pay_next_month,
    reject_loan,
)
from typing import List

router = APIRouter(prefix="/api/loans", tags=["loans"])


def _check_access(loan, member: KMember):
    if loan.member_id != member.id and member.role != MemberRole.PRESIDENT:
        raise HTTPException(status_code=403, detail="You don't have permission to view this loan")


def _check_unit(loan, president: KMember):
    if loan.member.unit_number != president.unit_number:
        raise HTTPException(status_code=403, detail="Loan belongs to a member of another unit")


@router.post("", response_model=LoanApplicationResponse)
def submit_loan_application(
    application: LoanApplicationCreate,
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """Apply for a loan. The president approves or rejects it."""
    try:
        return apply_for_loan(
            db,
            current_member.id,
            amount=application.amount,
            purpose=application.purpose,
            loan_type=application.loan_type,
            repayment_period=application.repayment_period,
        )
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/me", response_model=List[LoanOverviewResponse])
def list_my_loans(
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """Overview of each approved loan of the signed-in member."""
    try:
        return [get_loan_overview(db, loan.id) for loan in get_member_loans(db, current_member.id)]
    except InvalidLoanTerm as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/pending", response_model=List[LoanApplicationResponse])
def list_pending_loans(
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Loan applications of my unit waiting for a decision (president only)."""
    return get_pending_loans(db, current_member.unit_number)


@router.get("/{loan_id}", response_model=LoanOverviewResponse)
def get_loan_details(
    loan_id: str,
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """Repayment progress and month-by-month schedule of a loan."""
    try:
        loan = get_loan(db, loan_id)
        _check_access(loan, current_member)
        return get_loan_overview(db, loan_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{loan_id}/pay", response_model=LoanPaymentResponse)
def pay_loan_due(
    loan_id: str,
    current_member: KMember = Depends(get_current_approved_member),
    db: Session = Depends(get_db)
):
    """Pay the next unpaid month of one of my loans."""
    try:
        loan = get_loan(db, loan_id)
        if loan.member_id != current_member.id:
            raise HTTPException(status_code=403, detail="You can only pay your own loans")
        return pay_next_month(db, loan_id, paid_by=current_member.id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{loan_id}/approve", response_model=LoanOverviewResponse)
def approve_loan_application(
    loan_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Approve a pending loan application (president only)."""
    try:
        _check_unit(get_loan(db, loan_id), current_member)
        approve_loan(db, loan_id, approved_by=current_member.id)
        return get_loan_overview(db, loan_id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{loan_id}/reject", response_model=LoanApplicationResponse)
def reject_loan_application(
    loan_id: str,
    current_member: KMember = Depends(require_president),
    db: Session = Depends(get_db)
):
    """Reject a pending loan application (president only)."""
    try:
        _check_unit(get_loan(db, loan_id), current_member)
        return reject_loan(db, loan_id, rejected_by=current_member.id)
    except RecordNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
