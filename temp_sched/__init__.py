"""Interval engine, draft validation and wizard for temporary schedules."""

from .errors import (
    TempScheduleError,
    InvalidInterval,
    ZoneNotReady,
    UnknownTimeZone,
    DraftIncomplete,
    FieldError,
    MutationError
)
from .intervals import (
    Interval,
    Shift,
    engulfs,
    overlaps,
    resolve_instant,
    resolve_interval,
    merge_intervals
)
from .coverage import (
    load_zone,
    get_coverage_gaps,
    get_coverage_gap_items
)
from .validation import (
    ScheduleDraft,
    FormError,
    FormNotice,
    find_invalid_shifts,
    has_coverage_gaps,
    is_start_in_past,
    collect_errors,
    collect_notices,
    default_window
)
from .wizard import (
    ScheduleTimeZone,
    WizardState,
    TempSchedWizard
)

__all__ = [
    'TempScheduleError',
    'InvalidInterval',
    'ZoneNotReady',
    'UnknownTimeZone',
    'DraftIncomplete',
    'FieldError',
    'MutationError',
    'Interval',
    'Shift',
    'engulfs',
    'overlaps',
    'resolve_instant',
    'resolve_interval',
    'merge_intervals',
    'load_zone',
    'get_coverage_gaps',
    'get_coverage_gap_items',
    'ScheduleDraft',
    'FormError',
    'FormNotice',
    'find_invalid_shifts',
    'has_coverage_gaps',
    'is_start_in_past',
    'collect_errors',
    'collect_notices',
    'default_window',
    'ScheduleTimeZone',
    'WizardState',
    'TempSchedWizard'
]
