"""Coverage gap calculation for temporary schedules."""

import logging
from datetime import tzinfo
from typing import Iterable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import UnknownTimeZone, ZoneNotReady
from .intervals import Interval, Shift, overlaps, resolve_interval

logger = logging.getLogger(__name__)


def load_zone(zone: str | tzinfo | None) -> tzinfo:
    """
    Turn the schedule's zone into a tzinfo.

    A missing zone means the resolver has not answered yet; we refuse to
    guess UTC in that case.

    Raises:
        ZoneNotReady: If `zone` is None or empty
        UnknownTimeZone: If `zone` is not a known IANA name
    """
    if zone is None or zone == '':
        raise ZoneNotReady('schedule time zone has not been resolved yet')
    if isinstance(zone, tzinfo):
        return zone
    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise UnknownTimeZone(f'unknown time zone {zone!r}') from exc


def get_coverage_gaps(overall: Interval, shifts: Iterable[Shift], zone: str | tzinfo | None) -> list[Interval]:
    """
    Compute the parts of `overall` that no shift covers.

    Algorithm:
    1. Resolve the window and every shift to UTC instants in the zone
    2. Drop shifts that do not overlap the window
    3. Sort shifts by (start, end)
    4. Sweep a cursor from the window start, emitting a gap whenever the next
       shift starts after the cursor; overlapping and adjacent shifts merge
       because the cursor only moves forward
    5. Emit the tail gap if the cursor stops short of the window end

    Time complexity: O(n log n) for n shifts

    Args:
        overall: The temporary schedule's window
        shifts: Shifts in display order
        zone: Schedule zone name or tzinfo, used for naive bounds

    Returns:
        Ordered, non-empty gaps in UTC (possibly an empty list)

    Raises:
        ZoneNotReady: If the zone is not known yet
    """
    tz = load_zone(zone)
    window = resolve_interval(overall, tz)

    candidates = []
    for shift in shifts:
        resolved = resolve_interval(shift, tz)
        if not overlaps(window, resolved):
            logger.debug('Ignoring shift for %s outside of window: %s - %s', shift.user_id, shift.start, shift.end)
            continue
        candidates.append(resolved)

    candidates.sort(key=lambda s: (s.start, s.end))

    gaps = []
    cursor = window.start
    for shift in candidates:
        if shift.start > cursor:
            gaps.append(Interval(start=cursor, end=min(shift.start, window.end)))
        cursor = min(max(cursor, shift.end), window.end)

    if cursor < window.end:
        gaps.append(Interval(start=cursor, end=window.end))

    logger.debug('Found %d coverage gap(s) across %d shift(s)', len(gaps), len(candidates))
    return gaps


def get_coverage_gap_items(overall: Interval, shifts: Iterable[Shift], zone: str | tzinfo | None) -> list[dict]:
    """Coverage gaps as list rows for the shifts list, in time order."""
    return [
        {
            'start_at': gap.start,
            'end_at': gap.end,
            'message': 'No coverage',
        }
        for gap in get_coverage_gaps(overall, shifts, zone)
    ]
