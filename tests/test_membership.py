from datetime import date, datetime, timedelta, timezone

from app.aggregation import membership

EPOCH = date(2025, 3, 1)


def test_falls_back_to_epoch_without_join_date():
    assert membership.days_since(None, EPOCH, datetime(2025, 3, 10)) == 9


def test_counts_started_days():
    joined = datetime(2025, 3, 1, 10, 0)
    assert membership.days_since(joined, EPOCH, datetime(2025, 3, 2, 9, 0)) == 1
    assert membership.days_since(joined, EPOCH, datetime(2025, 3, 3, 11, 0)) == 3


def test_never_below_one():
    joined = datetime(2025, 5, 1)
    assert membership.days_since(joined, EPOCH, joined) == 1
    assert membership.days_since(joined, EPOCH, datetime(2025, 4, 1)) == 1


def test_non_decreasing_as_time_passes():
    joined = datetime(2025, 3, 1, 8, 0)
    nows = [joined - timedelta(days=2) + timedelta(hours=7 * i) for i in range(40)]
    days = [membership.days_since(joined, EPOCH, now) for now in nows]
    assert days == sorted(days)
    assert min(days) >= 1


def test_mixed_aware_and_naive_timestamps():
    joined = datetime(2025, 3, 1)
    now = datetime(2025, 3, 11, tzinfo=timezone.utc)
    assert membership.days_since(joined, EPOCH, now) == 10
