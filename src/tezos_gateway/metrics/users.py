"""Monthly active users estimation from monthly-bucketed series."""

from __future__ import annotations

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Sequence

ONE_WEEK_MS = 7 * 24 * 3600 * 1000


def round_half_up(x: float) -> int:
    """Round .5 away from zero for positives, like analytics dashboards do."""
    return math.floor(x + 0.5)


def add_calendar_month_ms(timestamp_ms: int) -> int:
    """Shift a UTC timestamp by one calendar month.

    Days past the end of the target month roll over into the month after it
    (Jan 31 + 1 month = Mar 3 in a non-leap year).
    """
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    year, month = divmod(dt.month, 12)
    first_of_next = dt.replace(year=dt.year + year, month=month + 1, day=1)
    shifted = first_of_next + timedelta(days=dt.day - 1)
    return round(shifted.timestamp() * 1000)


def _count(point: Sequence) -> int:
    if len(point) < 2 or point[1] is None:
        return 0
    return int(point[1])


def estimate_monthly_users(series: Sequence[Sequence], now_ms: int | None = None) -> int:
    """Best-effort users count for the current month.

    *series* is ascending ``(timestamp_ms, count)`` month buckets; the last
    bucket is usually partial. Younger than a week, the partial bucket is
    ignored in favour of the previous month. Otherwise it is extrapolated to a
    full month and averaged with the previous month, never going below the
    count already observed this month. A current bucket without a timestamp
    counts as too young.
    """
    last = list(series[-2:])
    if not last:
        return 0
    if len(last) == 1:
        return _count(last[0])

    prev, cur = last
    prev_count = _count(prev)
    # An undated current bucket cannot be extrapolated
    if not cur or cur[0] is None:
        return prev_count
    cur_ts, cur_count = int(cur[0]), _count(cur)

    if now_ms is None:
        now_ms = int(time.time() * 1000)
    elapsed_ms = now_ms - cur_ts
    if elapsed_ms < ONE_WEEK_MS:
        return prev_count

    month_ms = add_calendar_month_ms(cur_ts) - cur_ts
    projected = round_half_up(cur_count * month_ms / elapsed_ms)
    return max(round_half_up((prev_count + projected) / 2), cur_count)
