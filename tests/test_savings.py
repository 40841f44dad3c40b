import logging
from datetime import date, datetime
from decimal import Decimal

from app.aggregation import savings
from app.schemas.savings import WeeklyDuePayment


def test_personal_total_counts_paid_weeks():
    payment = WeeklyDuePayment(member_id="A", paid_weeks=[1, 2, 3, 5])
    assert savings.personal_total(payment, Decimal("100")) == Decimal("400")


def test_missing_weekly_amount_counts_as_zero(caplog):
    payment = WeeklyDuePayment(member_id="A", paid_weeks=[1, 2])

    with caplog.at_level(logging.WARNING, logger="app.aggregation.savings"):
        total = savings.personal_total(payment, None)

    assert total == Decimal("0")
    assert "not configured" in caplog.text


def test_paid_dates_from_json_document_are_coerced():
    payment = WeeklyDuePayment(
        member_id="A",
        paid_weeks=[1],
        paid_dates={"1": "2025-03-02T10:30:00"},
    )
    assert payment.paid_dates == {1: datetime(2025, 3, 2, 10, 30)}


def test_monthly_breakdown_is_newest_month_first_across_years():
    paid_dates = {
        1: datetime(2024, 12, 3),
        2: datetime(2024, 12, 10),
        3: datetime(2025, 1, 7),
        4: datetime(2025, 2, 4),
        5: datetime(2025, 2, 11),
    }

    breakdown = savings.monthly_breakdown(paid_dates, Decimal("50"))

    assert [m.month for m in breakdown] == ["February 2025", "January 2025", "December 2024"]
    assert [m.weeks_count for m in breakdown] == [2, 1, 2]
    assert [m.amount for m in breakdown] == [Decimal("100"), Decimal("50"), Decimal("100")]


def test_collective_total_and_average():
    payments = [
        WeeklyDuePayment(member_id="A", paid_weeks=[1, 2, 3]),
        WeeklyDuePayment(member_id="B", paid_weeks=[1]),
        WeeklyDuePayment(member_id="C"),
    ]

    collective = savings.collective_total(payments, Decimal("100"))

    assert collective == Decimal("400")
    assert savings.average_per_member(collective, 4) == Decimal("100")


def test_average_with_no_members_is_zero():
    assert savings.average_per_member(Decimal("500"), 0) == Decimal("0")


def test_last_paid_date_follows_payment_order():
    paid_dates = {5: datetime(2025, 4, 1), 4: datetime(2025, 4, 8)}

    assert savings.last_paid_date([5, 4], paid_dates) == datetime(2025, 4, 8)
    assert savings.last_paid_date([], paid_dates) is None


def test_summarize_combines_personal_and_unit_figures():
    own = WeeklyDuePayment(
        member_id="A",
        paid_weeks=[1, 2],
        paid_dates={1: datetime(2025, 3, 2), 2: datetime(2025, 3, 9)},
    )
    unit = [own, WeeklyDuePayment(member_id="B", paid_weeks=[1, 2, 3, 4])]

    overview = savings.summarize(own, Decimal("100"), unit, member_count=2)

    assert overview.total_amount == Decimal("200")
    assert overview.weeks_paid == 2
    assert overview.last_paid_date == datetime(2025, 3, 9)
    assert overview.collective_total == Decimal("600")
    assert overview.average_savings == Decimal("300")
    assert [m.month for m in overview.monthly_breakdown] == ["March 2025"]


def test_week_start_is_previous_sunday():
    # 2025-03-05 is a Wednesday
    assert savings.week_start(date(2025, 3, 5)) == datetime(2025, 3, 2)
    assert savings.week_start(datetime(2025, 3, 2, 18, 0)) == datetime(2025, 3, 2)


def test_weekly_schedule_statuses():
    weeks = savings.weekly_schedule(
        start=date(2025, 3, 5),
        weekly_amount=Decimal("100"),
        paid_weeks=[1],
        paid_dates={1: datetime(2025, 3, 3, 9, 0)},
        now=datetime(2025, 3, 20, 12, 0),
    )

    assert [w.week_number for w in weeks] == [1, 2, 3]
    assert [w.status for w in weeks] == ["paid", "overdue", "pending"]
    assert weeks[0].paid_date == datetime(2025, 3, 3, 9, 0)
    assert weeks[1].due_date == datetime(2025, 3, 15)
    assert weeks[2].paid_date is None


def test_dues_report_rounds_partial_weeks_up():
    report = savings.dues_report(
        start=date(2025, 3, 1),
        weekly_amount=Decimal("100"),
        paid_weeks=[1],
        paid_dates={1: datetime(2025, 3, 2)},
        now=datetime(2025, 3, 15, 12, 0),
    )

    assert report.total_weeks == 3
    assert report.paid_weeks == 1
    assert report.pending_weeks == 2
    assert report.total_due_amount == Decimal("300")
    assert report.paid_amount == Decimal("100")
    assert report.pending_amount == Decimal("200")
    assert report.last_paid_date == datetime(2025, 3, 2)


def test_dues_report_before_start_owes_nothing():
    report = savings.dues_report(date(2025, 3, 1), Decimal("100"), [], {}, datetime(2025, 2, 1))
    assert report.total_weeks == 0
    assert report.pending_amount == Decimal("0")

def test_weeks_to_date_matches_schedule_length():
    for start, now in [
        (date(2025, 3, 5), datetime(2025, 3, 20, 12, 0)),
        (date(2025, 3, 1), datetime(2025, 3, 2, 0, 0)),
        (date(2025, 3, 2), datetime(2025, 3, 2, 0, 0)),
    ]:
        schedule = savings.weekly_schedule(start, Decimal("100"), [], {}, now)
        assert savings.weeks_to_date(start, now) == len(schedule)


def test_weeks_to_date_before_start():
    assert savings.weeks_to_date(date(2025, 3, 10), datetime(2025, 3, 1)) == 0
