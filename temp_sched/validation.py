"""Validation of temporary schedule drafts.

Everything here is a pure function of the draft and the explicit `now`/`zone`
arguments, so the rendering layer can call it on every change.
"""

import logging
from datetime import datetime, time, timedelta, tzinfo
from typing import Literal

import pydantic

from .config import settings
from .coverage import get_coverage_gaps, load_zone
from .errors import DraftIncomplete, MutationError
from .intervals import Interval, Shift, engulfs, resolve_instant, resolve_interval

logger = logging.getLogger(__name__)

INVALID_SHIFT_BOUNDS = 'InvalidShiftBounds'
INVALID_WINDOW = 'InvalidWindow'
UNCOVERED_INTERVAL = 'UncoveredInterval'

INVALID_SHIFT_MESSAGE = 'One or more shifts extend beyond the start and/or end of this temporary schedule'
NO_COVERAGE_MESSAGE = 'You have shifts with no coverage.'
NO_COVERAGE_DETAILS = (
    'This means there are periods of time where no user will be on-call to receive alerts '
    'during this temporary schedule. If you would like to continue anyways, allow gaps in '
    'coverage then retry.'
)
INVALID_WINDOW_MESSAGE = 'The end time must not be before the start time'
PAST_START_MESSAGE ='Start time occurs in the past'
PAST_START_DETAILS = 'Any shifts or changes made to shifts in the past will be ignored when submitting.'


class ScheduleDraft(pydantic.BaseModel):
    """The window and shifts being edited. Unset times are None until chosen."""

    start: datetime | None = None
    end: datetime | None = None
    shifts: list[Shift] = []

    @property
    def is_complete(self) -> bool:
        return self.start is not None and self.end is not None

    @property
    def is_inverted(self) -> bool:
        """True while the end is set before the start, e.g. half way through editing the times."""
        return self.is_complete and self.end < self.start

    @property
    def interval(self) -> Interval:
        if not self.is_complete:
            raise DraftIncomplete('temporary schedule start and end must both be set')
        return Interval(start=self.start, end=self.end)


class FormError(pydantic.BaseModel):
    message: str
    kind: str
    non_submit: bool = False
    details: str | None = None


class FormNotice(pydantic.BaseModel):
    type: Literal['WARNING', 'INFO'] = 'WARNING'
    message: str
    details: str | None = None


def find_invalid_shifts(draft: ScheduleDraft, zone: str | tzinfo | None = None) -> list[Shift]:
    """
    Find shifts that are not contained in the draft's window.

    Args:
        draft: The draft to check
        zone: Optional schedule zone; when given, naive bounds are resolved in it first

    Returns:
        Offending shifts in insertion order (empty if the window is incomplete or inverted)
    """
    if not draft.is_complete or draft.is_inverted:
        return []

    window = draft.interval
    if zone is None:
        return [s for s in draft.shifts if not engulfs(window, s)]

    tz = load_zone(zone)
    window = resolve_interval(window, tz)
    return [s for s in draft.shifts if not engulfs(window, resolve_interval(s, tz))]


def has_coverage_gaps(draft: ScheduleDraft, zone: str | tzinfo | None) -> bool:
    """Return True if any part of the draft's window has no shift covering it. An inverted window has nothing to cover."""
    if draft.is_inverted:
        return False
    return len(get_coverage_gaps(draft.interval, draft.shifts, zone)) > 0


def is_start_in_past(
    draft: ScheduleDraft,
    now: datetime,
    zone: str | tzinfo | None = None,
    grace: timedelta | None = None,
) -> bool:
    """
    Return True if the draft starts earlier than `now` minus the grace window.

    Args:
        draft: The draft to check
        now: Current time, normally timezone-aware
        zone: Optional schedule zone used to resolve a naive start
        grace: Allowed lateness, defaults to the configured one hour

    A naive start with no zone is never reported as past.
    """
    if draft.start is None:
        return False
    if grace is None:
        grace = settings.past_start_grace

    start = draft.start
    if zone is not None:
        start = resolve_instant(start, load_zone(zone))
    elif start.tzinfo is None and now.tzinfo is not None:
        # wall-clock start can't be placed until the zone is known
        return False
    return start < now - grace


def collect_errors(
    draft: ScheduleDraft,
    *,
    step: int,
    zone: str | tzinfo | None,
    show_no_coverage_warning: bool,
    mutation_error: MutationError | None = None,
) -> list[FormError]:
    """
    Build the error list shown on the form.

    Order: non-field mutation errors, field mutation errors, the shift bounds
    error, then the coverage warning. The shift bounds error only blocks
    submission on the shifts step (step 1). A window that ends before it
    starts replaces the derived errors with a single blocking error.

    Args:
        draft: Current draft
        step: Current wizard step
        zone: Resolved schedule zone, or None while loading
        show_no_coverage_warning: Whether a submit attempt was held back by gaps
        mutation_error: Failure from the last submission, if any

    Returns:
        Errors to display
    """
    errors = []
    if mutation_error is not None:
        errors.extend(FormError(message=m, kind='non_field') for m in mutation_error.non_field_errors)
        errors.extend(
            FormError(message=f'{e.field}: {e.message}', kind='field')
            for e in mutation_error.field_errors
        )

    if not draft.is_complete:
        return errors

    if draft.is_inverted:
        errors.append(FormError(message=INVALID_WINDOW_MESSAGE, kind=INVALID_WINDOW))
        return errors

    if find_invalid_shifts(draft, zone):
        errors.append(FormError(
            message=INVALID_SHIFT_MESSAGE,
            kind=INVALID_SHIFT_BOUNDS,
            non_submit=step != 1,
        ))

    # no zone yet means gaps can't be computed
    if zone and show_no_coverage_warning and has_coverage_gaps(draft, zone):
        errors.append(FormError(
            message=NO_COVERAGE_MESSAGE,
            kind=UNCOVERED_INTERVAL,
            details=NO_COVERAGE_DETAILS,
        ))

    return errors


def collect_notices(
    draft: ScheduleDraft,
    *,
    now: datetime,
    edit: bool,
    zone: str | tzinfo | None = None,
) -> list[FormNotice]:
    """Advisory notices for the form. The past-start notice never shows while editing."""
    if edit or not is_start_in_past(draft, now, zone):
        return []
    return [FormNotice(message=PAST_START_MESSAGE, details=PAST_START_DETAILS)]


def default_window(
    now: datetime,
    zone: str | tzinfo,
    weekday: int | None = None,
    duration: timedelta | None = None,
) -> tuple[datetime, datetime]:
    """
    Default window for a new temporary schedule.

    Starts at midnight of the next `weekday` (ISO numbering, Sunday by
    default) after today in the schedule zone and lasts `duration` (a week by
    default) of wall-clock time.

    Args:
        now: Current time
        zone: Schedule zone
        weekday: ISO weekday to start on
        duration: Length of the window

    Returns:
        (start, end) as aware datetimes in the schedule zone
    """
    tz = load_zone(zone)
    if weekday is None:
        weekday = settings.DEFAULT_START_WEEKDAY
    if duration is None:
        duration = settings.default_duration

    local_now = now.astimezone(tz)
    days_ahead = (weekday - local_now.isoweekday()) % 7 or 7
    start = datetime.combine(local_now.date() + timedelta(days=days_ahead), time.min, tzinfo=tz)
    end = start + duration

    logger.debug('Default window for %s: %s - %s', tz, start, end)
    return start, end
