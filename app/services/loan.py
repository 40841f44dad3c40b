import logging
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Session
from app.aggregation import loans
from app.core.audit import write_audit_log
from app.core.config import settings
from app.core.errors import InvalidLoanTerm, RecordNotFound
from app.models.loan import LOAN_TYPES, LoanApplication, LoanApplicationStatus
from app.models.member import KMember, MemberStatus
from app.services.member import get_member
from app.schemas.loan import LoanOverviewResponse, LoanPaymentResponse, LoanRecord
from typing import List

logger = logging.getLogger(__name__)


def get_loan(
    db: Session,
    loan_id: str
) -> LoanApplication:
    loan = db.query(LoanApplication).filter(LoanApplication.id == loan_id).first()
    if not loan:
        raise RecordNotFound("Loan not found")
    return loan


def get_member_loans(
    db: Session,
    member_id: str
) -> List[LoanApplication]:
    """Approved loans of a member, oldest first."""
    return db.query(LoanApplication).filter(
        LoanApplication.member_id == member_id,
        LoanApplication.status == LoanApplicationStatus.APPROVED
    ).order_by(LoanApplication.approved_at).all()


def get_pending_loans(
    db: Session,
    unit_number: str
) -> List[LoanApplication]:
    """Loan applications of a unit waiting for the president's decision."""
    return db.query(LoanApplication).join(LoanApplication.member).filter(
        KMember.unit_number == unit_number,
        LoanApplication.status == LoanApplicationStatus.PENDING
    ).order_by(LoanApplication.created_at).all()


def apply_for_loan(
    db: Session,
    member_id: str,
    amount: Decimal,
    purpose: str,
    loan_type: str = "personal",
    repayment_period: int = None,
    now: datetime = None
) -> LoanApplication:
    """Submit a pending loan application for an approved member."""
    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")
    if member.status != MemberStatus.APPROVED:
        raise ValueError("Only approved members can apply for a loan")

    if repayment_period is None:
        repayment_period = settings.DEFAULT_REPAYMENT_PERIOD
    if repayment_period <= 0:
        raise InvalidLoanTerm(repayment_period)
    if repayment_period > settings.MAX_REPAYMENT_PERIOD:
        raise ValueError(f"Maximum repayment period is {settings.MAX_REPAYMENT_PERIOD} months")

    amount = Decimal(str(amount))
    if amount <= 0:
        raise ValueError("Amount must be positive")
    if amount > settings.MAX_LOAN_AMOUNT:
        raise ValueError(f"Maximum loan amount is {settings.MAX_LOAN_AMOUNT}")

    if loan_type not in LOAN_TYPES:
        raise ValueError(f"Unknown loan type '{loan_type}'")

    loan = LoanApplication(
        member_id=member.id,
        amount=amount,
        purpose=(purpose or "").strip(),
        loan_type=loan_type,
        repayment_period=repayment_period,
        status=LoanApplicationStatus.PENDING,
        paid_months=[],
        created_at=now or datetime.utcnow(),
    )
    db.add(loan)
    db.commit()
    db.refresh(loan)
    logger.info("Member %s applied for a %s loan of %s", member.id, loan_type, amount)
    return loan


def reject_loan(
    db: Session,
    loan_id: str,
    rejected_by: str,
    rejected_at: datetime = None
) -> LoanApplication:
    """Reject a pending loan application."""
    loan = get_loan(db, loan_id)
    if loan.status == LoanApplicationStatus.REJECTED:
        return loan  # Already rejected
    if loan.status != LoanApplicationStatus.PENDING:
        raise ValueError("Only pending loans can be rejected")

    loan.status = LoanApplicationStatus.REJECTED
    loan.rejected_at = rejected_at or datetime.utcnow()

    db.commit()
    db.refresh(loan)
    logger.info("Loan %s of member %s rejected by %s", loan.id, loan.member_id, rejected_by)
    write_audit_log(rejected_by, "president", "reject_loan", f"loan={loan.id} amount={loan.amount}")
    return loan


def approve_loan(
    db: Session,
    loan_id: str,
    approved_by: str,
    approved_at: datetime = None
) -> LoanApplication:
    """Approve a pending loan. Repayment starts in the month of approval."""
    loan = get_loan(db, loan_id)
    if loan.status == LoanApplicationStatus.APPROVED:
        return loan  # Already approved
    if loan.status != LoanApplicationStatus.PENDING:
        raise ValueError("Only pending loans can be approved")
    if loan.repayment_period is not None and loan.repayment_period <= 0:
        raise InvalidLoanTerm(loan.repayment_period)

    loan.status = LoanApplicationStatus.APPROVED
    loan.approved_at = approved_at or datetime.utcnow()
    if loan.paid_months is None:
        loan.paid_months = []

    db.commit()
    db.refresh(loan)
    logger.info("Loan %s of member %s approved by %s", loan.id, loan.member_id, approved_by)
    write_audit_log(approved_by, "president", "approve_loan", f"loan={loan.id} amount={loan.amount}")
    return loan


def get_loan_record(
    db: Session,
    loan: LoanApplication
) -> LoanRecord:
    """Repayment terms of an approved loan."""
    if loan.status != LoanApplicationStatus.APPROVED or loan.approved_at is None:
        raise ValueError("Loan is not approved")

    return loans.terms_from_application(
        principal=loan.amount,
        repayment_period=loan.repayment_period or settings.DEFAULT_REPAYMENT_PERIOD,
        interest_rate=settings.LOAN_INTEREST_RATE,
        start_date=loan.approved_at.date(),
        paid_months=loan.paid_months or [],
    )


def get_loan_overview(
    db: Session,
    loan_id: str
) -> LoanOverviewResponse:
    loan = get_loan(db, loan_id)
    record = get_loan_record(db, loan)

    next_month = loans.next_unpaid_month(record.paid_months, record.total_months)
    return LoanOverviewResponse(
        loan_id=loan.id,
        member_id=loan.member_id,
        loan_type=loan.loan_type,
        purpose=loan.purpose,
        principal=loan.amount,
        monthly_due=record.monthly_due,
        total_months=record.total_months,
        start_date=record.start_date,
        next_unpaid_month=next_month,
        next_unpaid_label=loans.month_label(record.start_date, next_month) if next_month else None,
        end_label=loans.end_label(record),
        completed=loans.is_completed(record),
        summary=loans.summarize(record),
        schedule=loans.schedule(record),
    )


def pay_next_month(
    db: Session,
    loan_id: str,
    paid_by: str,
    now: datetime = None
) -> LoanPaymentResponse:
    """
    Record payment of the lowest unpaid month of a loan.

    The month is added with set semantics, so a retried request cannot count
    the same month twice.
    """
    now = now or datetime.utcnow()
    loan = get_loan(db, loan_id)
    record = get_loan_record(db, loan)

    month = loans.next_unpaid_month(record.paid_months, record.total_months)
    if month is None:
        raise ValueError("Loan is already fully paid")

    paid_months = list(loan.paid_months or [])
    if month not in paid_months:
        paid_months.append(month)
    loan.paid_months = paid_months  # reassign so the JSON column is flagged dirty

    db.commit()
    db.refresh(loan)

    record = get_loan_record(db, loan)
    label = loans.month_label(record.start_date, month)
    logger.info("Loan %s: month %d (%s) paid by %s", loan.id, month, label, paid_by)
    write_audit_log(paid_by, "k_member", "pay_loan_month", f"loan={loan.id} month={month} amount={record.monthly_due}")

    return LoanPaymentResponse(
        loan_id=loan.id,
        paid_month=month,
        paid_label=label,
        paid_at=now,
        summary=loans.summarize(record),
    )
