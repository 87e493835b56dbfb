"""Pure time arithmetic behind every attendance transition.

Each function depends only on its arguments so a history snapshot can be
recomputed from `now`, the slot bounds and the entry state.
"""

from __future__ import annotations

import math
from datetime import datetime

from ..common.datetime_utils import hours_between, minutes_between


def late_minutes(now: datetime, scheduled_start: datetime) -> int:
    """Whole minutes past the scheduled start, never negative."""
    return max(0, math.floor(minutes_between(scheduled_start, now)))


def break_hours(since: datetime, now: datetime) -> float:
    return max(0.0, hours_between(since, now))


def total_hours(time_in: datetime, time_out: datetime, break_time: float) -> float:
    """elapsed(time_in, time_out) - break_time, floored at 0."""
    return max(0.0, hours_between(time_in, time_out) - float(break_time or 0))


def minutes_past_end(now: datetime, scheduled_end: datetime) -> float:
    """Signed minutes from the scheduled end to `now` (negative when leaving early)."""
    return minutes_between(scheduled_end, now)
