from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict
from datetime import datetime
from decimal import Decimal


class WeeklyDuePayment(BaseModel):
    """A member's weekly-due payment history."""
    member_id: str
    paid_weeks: List[int] = Field(default_factory=list, description="Week numbers in the order they were paid")
    paid_dates: Dict[int, datetime] = Field(default_factory=dict, description="Week number -> time of payment")

    @field_validator("paid_weeks", "paid_dates", mode="before")
    @classmethod
    def _none_is_empty(cls, value, info):
        if value is None:
            return [] if info.field_name == "paid_weeks" else {}
        return value


class MonthlySavings(BaseModel):
    month: str = Field(..., description="Display label, e.g. 'March 2025'")
    year: int
    month_number: int
    amount: Decimal
    weeks_count: int


class SavingsOverview(BaseModel):
    total_amount: Decimal
    weeks_paid: int
    last_paid_date: Optional[datetime] = None
    weekly_amount: Decimal
    collective_total: Decimal
    member_count: int
    average_savings: Decimal
    monthly_breakdown: List[MonthlySavings]


class WeeklyDue(BaseModel):
    week_number: int
    start_date: datetime
    end_date: datetime
    due_date: datetime
    is_paid: bool
    paid_date: Optional[datetime] = None
    amount: Decimal
    status: str  # paid, overdue, pending


class DuesReport(BaseModel):
    total_weeks: int
    paid_weeks: int
    pending_weeks: int
    weekly_amount: Decimal
    total_due_amount: Decimal
    paid_amount: Decimal
    pending_amount: Decimal
    last_paid_date: Optional[datetime] = None


class MemberDuesReport(BaseModel):
    member_id: str
    member_name: str
    phone: str
    weekly_dues: DuesReport


class WeeklyDueSettingsUpdate(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Weekly due amount per member")
    description: Optional[str] = Field(None, description="Shown to members on the pay screen")


class WeeklyDueSettingsResponse(BaseModel):
    amount: Decimal
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WeeklyDuePaymentResponse(BaseModel):
    member_id: str
    week_number: int
    paid_at: datetime
    amount: Decimal
    weeks_paid: int
