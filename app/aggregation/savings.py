"""
Weekly-due savings.

Every K-member pays a fixed amount each week. A member's savings are simply
the number of weeks paid times the weekly amount; the unit's collective
savings are the sum over its members.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from app.aggregation.dates import DateLike, align, as_datetime, month_label
from app.schemas.savings import (
    DuesReport,
    MonthlySavings,
    SavingsOverview,
    WeeklyDue,
    WeeklyDuePayment,
)

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


def resolve_weekly_amount(weekly_amount) -> Decimal:
    """Weekly amount as a Decimal; an unconfigured amount counts as zero."""
    if weekly_amount is None:
        logger.warning("Weekly due amount is not configured, treating it as 0")
        return Decimal("0")
    return Decimal(str(weekly_amount))


def personal_total(payment: WeeklyDuePayment, weekly_amount) -> Decimal:
    return len(payment.paid_weeks) * resolve_weekly_amount(weekly_amount)


def monthly_breakdown(paid_dates: Mapping[int, datetime], weekly_amount) -> List[MonthlySavings]:
    """Savings grouped by calendar month of payment, newest month first."""
    amount = resolve_weekly_amount(weekly_amount)

    weeks_per_month: Dict[tuple, int] = defaultdict(int)
    for paid_at in paid_dates.values():
        if paid_at is None:
            continue
        weeks_per_month[(paid_at.year, paid_at.month)] += 1

    return [
        MonthlySavings(
            month=month_label(year, month),
            year=year,
            month_number=month,
            amount=weeks * amount,
            weeks_count=weeks,
        )
        for (year, month), weeks in sorted(weeks_per_month.items(), reverse=True)
    ]


def collective_total(all_payments: Iterable[WeeklyDuePayment], weekly_amount) -> Decimal:
    amount = resolve_weekly_amount(weekly_amount)
    return sum((personal_total(p, amount) for p in all_payments), Decimal("0"))


def average_per_member(collective: Decimal, member_count: int) -> Decimal:
    if not member_count or member_count <= 0:
        return Decimal("0")
    return Decimal(collective) / member_count


def last_paid_date(paid_weeks: Sequence[int], paid_dates: Mapping[int, datetime]) -> Optional[datetime]:
    """
    Payment time of the most recently recorded week.

    This follows insertion order of ``paid_weeks``, not the highest week
    number: paying week 5 and then week 4 reports the payment of week 4.
    """
    if not paid_weeks:
        return None
    return paid_dates.get(paid_weeks[-1])


def summarize(
    own: WeeklyDuePayment,
    weekly_amount,
    unit_payments: Iterable[WeeklyDuePayment],
    member_count: int,
) -> SavingsOverview:
    """Personal and unit-wide savings for the savings screen."""
    amount = resolve_weekly_amount(weekly_amount)
    collective = collective_total(unit_payments, amount)

    return SavingsOverview(
        total_amount=personal_total(own, amount),
        weeks_paid=len(own.paid_weeks),
        last_paid_date=last_paid_date(own.paid_weeks, own.paid_dates),
        weekly_amount=amount,
        collective_total=collective,
        member_count=member_count,
        average_savings=average_per_member(collective, member_count),
        monthly_breakdown=monthly_breakdown(own.paid_dates, amount),
    )


def week_start(start: DateLike) -> datetime:
    """Midnight of the Sunday on or before ``start``."""
    start = as_datetime(start).replace(hour=0, minute=0, second=0, microsecond=0)
    # weekday(): Monday=0 .. Sunday=6
    days_since_sunday = (start.weekday() + 1) % 7
    return start - timedelta(days=days_since_sunday)


def weeks_to_date(start: DateLike, now: datetime) -> int:
    """Number of weeks ``weekly_schedule`` lists for a member at ``now``."""
    first, now = align(week_start(start), now)
    if first > now:
        return 0
    return (now - first) // WEEK + 1


def weekly_schedule(
    start: DateLike,
    weekly_amount,
    paid_weeks: Sequence[int],
    paid_dates: Mapping[int, datetime],
    now: datetime,
) -> List[WeeklyDue]:
    """
    Every week from the member's first week up to the current one.

    Week 1 starts on the Sunday on or before ``start``; a week is due on its
    last day and becomes overdue once that has passed unpaid.
    """
    amount = resolve_weekly_amount(weekly_amount)
    paid = set(paid_weeks)

    weeks = []
    current = week_start(start)
    current, now = align(current, now)
    week_number = 1
    while current <= now:
        week_end = current + timedelta(days=6)
        is_paid = week_number in paid
        if is_paid:
            status = "paid"
        elif week_end < now:
            status = "overdue"
        else:
            status = "pending"
        weeks.append(WeeklyDue(
            week_number=week_number,
            start_date=current,
            end_date=week_end,
            due_date=week_end,
            is_paid=is_paid,
            paid_date=paid_dates.get(week_number) if is_paid else None,
            amount=amount,
            status=status,
        ))
        current += WEEK
        week_number += 1
    return weeks


def dues_report(
    start: DateLike,
    weekly_amount,
    paid_weeks: Sequence[int],
    paid_dates: Mapping[int, datetime],
    now: datetime,
) -> DuesReport:
    """Weeks owed since ``start`` against weeks paid, for the president's report."""
    amount = resolve_weekly_amount(weekly_amount)
    start, now = align(as_datetime(start), now)

    elapsed = (now - start) / WEEK
    total_weeks = max(0, math.ceil(elapsed))
    paid_count = len(paid_weeks)
    total_due = total_weeks * amount
    paid_amount = paid_count * amount

    return DuesReport(
        total_weeks=total_weeks,
        paid_weeks=paid_count,
        pending_weeks=total_weeks - paid_count,
        weekly_amount=amount,
        total_due_amount=total_due,
        paid_amount=paid_amount,
        pending_amount=total_due - paid_amount,
        last_paid_date=last_paid_date(paid_weeks, paid_dates),
    )
