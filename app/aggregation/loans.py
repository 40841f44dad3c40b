"""
Loan repayment schedule and progress.

A loan is repaid in ``total_months`` equal installments of ``monthly_due``.
Paying a month appends its number to ``paid_months``; months can be paid in
any order but the pay screen always offers the lowest unpaid one.
"""

import math
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

from app.aggregation.dates import add_months, month_label as _label
from app.core.errors import InvalidLoanTerm
from app.schemas.loan import LoanInstallment, LoanRecord, LoanSummary

DEFAULT_REPAYMENT_PERIOD = 12


def _check_term(total_months: int) -> None:
    if total_months is None or total_months <= 0:
        raise InvalidLoanTerm(total_months)


def next_unpaid_month(paid_months: Iterable[int], total_months: int) -> Optional[int]:
    """First month in 1..total_months that has not been paid, or None when fully paid."""
    _check_term(total_months)
    paid = set(paid_months)
    for month in range(1, total_months + 1):
        if month not in paid:
            return month
    return None


def summarize(loan: LoanRecord) -> LoanSummary:
    """Amounts and progress for a loan."""
    _check_term(loan.total_months)

    completed_months = len(loan.paid_months)
    total_amount = loan.monthly_due * loan.total_months
    paid_amount = loan.monthly_due * completed_months

    return LoanSummary(
        total_amount=total_amount,
        paid_amount=paid_amount,
        remaining_amount=total_amount - paid_amount,
        completed_months=completed_months,
        remaining_months=loan.total_months - completed_months,
        progress_percent=100.0 * completed_months / loan.total_months,
    )


def month_label(start_date: date, month_number: int) -> str:
    """Display label ('March 2025') of the given installment month."""
    due = add_months(start_date, month_number - 1)
    return _label(due.year, due.month)


def end_label(loan: LoanRecord) -> str:
    """Label of the month after the last installment (expected completion)."""
    _check_term(loan.total_months)
    end = add_months(loan.start_date, loan.total_months)
    return _label(end.year, end.month)


def is_completed(loan: LoanRecord) -> bool:
    _check_term(loan.total_months)
    return len(loan.paid_months) >= loan.total_months


def schedule(loan: LoanRecord) -> List[LoanInstallment]:
    """One installment per month, marking paid months and the one due next."""
    due_month = next_unpaid_month(loan.paid_months, loan.total_months)

    installments = []
    for month in range(1, loan.total_months + 1):
        if month in loan.paid_months:
            status = "paid"
        elif month == due_month:
            status = "due"
        else:
            status = "upcoming"
        installments.append(LoanInstallment(
            month_number=month,
            label=month_label(loan.start_date, month),
            due_date=add_months(loan.start_date, month - 1),
            amount=loan.monthly_due,
            status=status,
        ))
    return installments


def terms_from_application(
    principal: Decimal,
    repayment_period: Optional[int],
    interest_rate: Decimal,
    start_date: date,
    paid_months: Iterable[int] = (),
) -> LoanRecord:
    """
    Build the repayment terms of an approved loan application.

    Interest is a flat rate charged once on the principal. The installment is
    rounded up to the next whole rupee, so the last installments may overpay
    the repayable amount by a few rupees.
    """
    total_months = repayment_period or DEFAULT_REPAYMENT_PERIOD
    _check_term(total_months)

    principal = Decimal(str(principal or 0))
    total_repayable = principal + principal * Decimal(str(interest_rate))
    monthly_due = Decimal(math.ceil(total_repayable / total_months))

    return LoanRecord(
        total_months=total_months,
        monthly_due=monthly_due,
        paid_months=set(paid_months or ()),
        start_date=start_date,
    )
