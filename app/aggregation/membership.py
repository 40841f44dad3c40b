import math
from datetime import datetime, timedelta
from typing import Optional

from app.aggregation.dates import DateLike, align, as_datetime

DAY = timedelta(days=1)


def days_since(joined_at: Optional[DateLike], fallback_epoch: DateLike, now: datetime) -> int:
    """
    Whole days a member has belonged to the unit, counting a started day as one.

    Members without a join date are counted from ``fallback_epoch``. The
    result is never below 1, even when ``now`` is before the start.
    """
    start = as_datetime(joined_at if joined_at is not None else fallback_epoch)
    start, now = align(start, as_datetime(now))
    days = math.ceil((now - start) / DAY)
    return max(1, days)
