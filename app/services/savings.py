import logging
from datetime import datetime
from decimal import Decimal
from sqlalchemy.orm import Session
from app.aggregation import savings
from app.core.audit import write_audit_log
from app.core.config import settings
from app.core.errors import ConfigMissing, RecordNotFound
from app.models.savings import WeeklyDuePayment, WeeklyDueSettings, WEEKLY_DUE_SETTINGS_ID
from app.schemas.savings import (
    MemberDuesReport,
    SavingsOverview,
    WeeklyDue,
    WeeklyDuePayment as WeeklyDuePaymentRecord,
    WeeklyDuePaymentResponse,
)
from app.services.member import get_member, get_unit_members
from typing import List, Optional

logger = logging.getLogger(__name__)


def get_weekly_settings(
    db: Session
) -> Optional[WeeklyDueSettings]:
    return db.query(WeeklyDueSettings).filter(WeeklyDueSettings.id == WEEKLY_DUE_SETTINGS_ID).first()


def get_weekly_amount(
    db: Session
) -> Optional[Decimal]:
    """Configured weekly due amount, or None when the president has not set one."""
    config = get_weekly_settings(db)
    return config.amount if config else None


def set_weekly_amount(
    db: Session,
    amount: Decimal,
    description: str = None,
    updated_by: str = None,
    now: datetime = None
) -> WeeklyDueSettings:
    """Create or replace the unit-wide weekly due amount."""
    config = get_weekly_settings(db)
    if not config:
        config = WeeklyDueSettings(id=WEEKLY_DUE_SETTINGS_ID)
        db.add(config)

    config.amount = amount
    config.description = description
    config.updated_at = now or datetime.utcnow()

    db.commit()
    db.refresh(config)
    logger.info("Weekly due amount set to %s by %s", amount, updated_by)
    return config


def _payment_row(db: Session, member_id: str) -> Optional[WeeklyDuePayment]:
    return db.query(WeeklyDuePayment).filter(WeeklyDuePayment.member_id == member_id).first()


def _to_record(member_id: str, row: Optional[WeeklyDuePayment]) -> WeeklyDuePaymentRecord:
    if row is None:
        return WeeklyDuePaymentRecord(member_id=member_id)
    return WeeklyDuePaymentRecord(
        member_id=member_id,
        paid_weeks=row.paid_weeks,
        paid_dates=row.paid_dates,
    )


def get_payment(
    db: Session,
    member_id: str
) -> WeeklyDuePaymentRecord:
    """Payment history of a member; empty when nothing has been paid yet."""
    return _to_record(member_id, _payment_row(db, member_id))


def pay_weekly_due(
    db: Session,
    member_id: str,
    week_number: int,
    now: datetime = None
) -> WeeklyDuePaymentResponse:
    """Record payment of one week. Paying requires a configured weekly amount."""
    now = now or datetime.utcnow()

    amount = get_weekly_amount(db)
    if amount is None:
        raise ConfigMissing("Weekly due amount")

    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")

    if week_number < 1:
        raise ValueError("Week number must be 1 or more")
    start = member.joined_at or settings.MEMBERSHIP_FALLBACK_EPOCH
    if week_number > savings.weeks_to_date(start, now):
        raise ValueError(f"Week {week_number} has not started yet")

    row = _payment_row(db, member.id)
    if row is None:
        row = WeeklyDuePayment(member_id=member.id, paid_weeks=[], paid_dates={})
        db.add(row)

    paid_weeks = list(row.paid_weeks or [])
    if week_number in paid_weeks:
        raise ValueError(f"Week {week_number} is already paid")

    paid_dates = dict(row.paid_dates or {})
    paid_weeks.append(week_number)
    paid_dates[str(week_number)] = now.isoformat()

    # reassign so the JSON columns are flagged dirty
    row.paid_weeks = paid_weeks
    row.paid_dates = paid_dates
    row.last_updated = now

    db.commit()
    logger.info("Member %s paid weekly due for week %d", member.id, week_number)
    write_audit_log(member.id, member.role.value, "pay_weekly_due", f"week={week_number} amount={amount}")

    return WeeklyDuePaymentResponse(
        member_id=member.id,
        week_number=week_number,
        paid_at=now,
        amount=amount,
        weeks_paid=len(paid_weeks),
    )


def get_savings_overview(
    db: Session,
    member_id: str
) -> SavingsOverview:
    """Personal savings of a member alongside the totals of their unit."""
    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")

    weekly_amount = get_weekly_amount(db)
    own = get_payment(db, member.id)

    unit_members = get_unit_members(db, member.unit_number)
    unit_payments = [get_payment(db, m.id) for m in unit_members]

    return savings.summarize(own, weekly_amount, unit_payments, len(unit_members))


def get_weekly_schedule(
    db: Session,
    member_id: str,
    now: datetime = None
) -> List[WeeklyDue]:
    """All weeks owed by a member so far with their paid/overdue/pending status."""
    member = get_member(db, member_id)
    if not member:
        raise RecordNotFound("Member not found")

    weekly_amount = get_weekly_amount(db)
    if weekly_amount is None:
        raise ConfigMissing("Weekly due amount")

    payment = get_payment(db, member.id)
    start = member.joined_at or settings.MEMBERSHIP_FALLBACK_EPOCH
    return savings.weekly_schedule(
        start,
        weekly_amount,
        payment.paid_weeks,
        payment.paid_dates,
        now or datetime.utcnow(),
    )


def get_dues_report(
    db: Session,
    unit_number: str,
    now: datetime = None
) -> List[MemberDuesReport]:
    """Weekly dues owed versus paid for every approved member of a unit."""
    now = now or datetime.utcnow()
    weekly_amount = get_weekly_amount(db)

    reports = []
    for member in get_unit_members(db, unit_number):
        payment = get_payment(db, member.id)
        start = member.joined_at or settings.MEMBERSHIP_FALLBACK_EPOCH
        reports.append(MemberDuesReport(
            member_id=member.id,
            member_name=member.full_name,
            phone=member.phone,
            weekly_dues=savings.dues_report(start, weekly_amount, payment.paid_weeks, payment.paid_dates, now),
        ))
    return reports
