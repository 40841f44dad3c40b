from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Set, List
from datetime import date, datetime
from decimal import Decimal
from app.models.loan import LoanApplicationStatus


class LoanRecord(BaseModel):
    """Repayment terms of an approved loan and the months already paid."""
    total_months: int = Field(..., description="Number of monthly installments")
    monthly_due: Decimal = Field(..., ge=0, description="Installment owed per month")
    paid_months: Set[int] = Field(default_factory=set, description="Month numbers (1-based) already paid")
    start_date: date = Field(..., description="Date the first installment period starts")

    @field_validator("paid_months", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return set() if value is None else value

    @model_validator(mode="after")
    def _paid_months_within_term(self):
        # A non-positive term is reported by the calculator as InvalidLoanTerm
        if self.total_months > 0:
            outside = sorted(m for m in self.paid_months if m < 1 or m > self.total_months)
            if outside:
                raise ValueError(f"Paid months {outside} fall outside 1..{self.total_months}")
        return self


class LoanSummary(BaseModel):
    total_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal
    completed_months: int
    remaining_months: int
    progress_percent: float


class LoanInstallment(BaseModel):
    month_number: int
    label: str
    due_date: date
    amount: Decimal
    status: str  # paid, due, upcoming


class LoanOverviewResponse(BaseModel):
    """Everything the pay-loan-due view shows for one loan."""
    loan_id: str
    member_id: str
    loan_type: Optional[str] = None
    purpose: Optional[str] = None
    principal: Decimal
    monthly_due: Decimal
    total_months: int
    start_date: date
    next_unpaid_month: Optional[int] = None
    next_unpaid_label: Optional[str] = None
    end_label: str
    completed: bool
    summary: LoanSummary
    schedule: List[LoanInstallment]


class LoanPaymentResponse(BaseModel):
    loan_id: str
    paid_month: int
    paid_label: str
    paid_at: datetime
    summary: LoanSummary


class LoanApplicationCreate(BaseModel):
    """Schema for a member's loan application."""
    amount: Decimal = Field(..., gt=0, description="Principal requested")
    purpose: str = Field(..., min_length=10, description="What the loan is for (at least 10 characters)")
    repayment_period: Optional[int] = Field(None, description="Number of monthly installments; unit default when omitted")
    loan_type: str = Field("personal", description="personal, business, education, medical or housing")


class LoanApplicationResponse(BaseModel):
    id: str
    member_id: str
    amount: Decimal
    purpose: Optional[str] = None
    loan_type: str
    repayment_period: Optional[int] = None
    status: LoanApplicationStatus
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
