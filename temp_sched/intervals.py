"""Half-open time intervals and the operations over them."""

from datetime import date, datetime, time, timezone, tzinfo
from typing import Iterable

import pydantic

from .errors import InvalidInterval


class Interval(pydantic.BaseModel):
    """A half-open time range [start, end). Degenerate ranges (start == end) are allowed."""

    model_config = pydantic.ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @pydantic.model_validator(mode='after')
    def validate_time_order(self) -> 'Interval':
        if self.end < self.start:
            raise InvalidInterval(self.start, self.end)
        return self


class Shift(Interval):
    """An interval owned by the user who is on call for it."""

    model_config = pydantic.ConfigDict(frozen=True, populate_by_name=True)

    user_id: str = pydantic.Field(alias='userID')


def _check(interval) -> None:
    if interval.end < interval.start:
        raise InvalidInterval(interval.start, interval.end)


def engulfs(outer, inner) -> bool:
    """Return True if `inner` lies entirely within `outer`."""
    _check(outer)
    _check(inner)
    return outer.start <= inner.start and inner.end <= outer.end


def overlaps(a, b) -> bool:
    """Return True if two half-open intervals share any instant. Touching endpoints do not overlap."""
    _check(a)
    _check(b)
    return a.start < b.end and b.start < a.end


def resolve_instant(value: date | datetime, zone: tzinfo) -> datetime:
    """
    Convert a date or datetime to an absolute UTC instant.

    Naive datetimes are wall-clock times in `zone`, and bare dates mean
    midnight in `zone`. Aware datetimes keep their own offset. The models
    only hold datetimes; dates are accepted for callers working with
    date-only pickers.

    Args:
        value: The date or datetime to resolve
        zone: The schedule's time zone

    Returns:
        An aware datetime in UTC
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=zone)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=zone).astimezone(timezone.utc)
    raise TypeError(f'cannot resolve {value!r} to an instant')


def resolve_interval(interval: Interval, zone: tzinfo) -> Interval:
    """Return a copy of `interval` (or shift) with both bounds resolved to UTC instants."""
    return interval.model_copy(update={
        'start': resolve_instant(interval.start, zone),
        'end': resolve_instant(interval.end, zone),
    })


def merge_intervals(intervals: Iterable[Interval]) -> list[Interval]:
    """
    Merge intervals into the minimal sorted list of disjoint intervals.

    Overlapping and touching intervals are combined, so the result describes
    the covered time rather than who covers it.

    Args:
        intervals: Intervals or shifts, in any order

    Returns:
        Sorted, merged intervals without owners
    """
    items = sorted(intervals, key=lambda i: (i.start, i.end))
    if not items:
        return []

    merged = []
    cur_start, cur_end = items[0].start, items[0].end

    for item in items[1:]:
        if item.start <= cur_end:
            cur_end = max(cur_end, item.end)
        else:
            merged.append(Interval(start=cur_start, end=cur_end))
            cur_start, cur_end = item.start, item.end

    merged.append(Interval(start=cur_start, end=cur_end))
    return merged
