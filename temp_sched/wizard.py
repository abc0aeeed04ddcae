"""Two-step wizard for defining a temporary schedule.

Step 0 picks the window (Times), step 1 fills it with shifts (Shifts).
Editing an existing temporary schedule starts on, and stays on, step 1.
"""

import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Iterable

import pydantic

from .errors import MutationError
from .intervals import Shift
from .validation import (
    FormError,
    FormNotice,
    ScheduleDraft,
    collect_errors,
    collect_notices,
    default_window,
    find_invalid_shifts,
    has_coverage_gaps,
)

logger = logging.getLogger(__name__)

TIMES_STEP = 0
SHIFTS_STEP = 1
STEP_COUNT = 2


class ScheduleTimeZone(pydantic.BaseModel):
    """Answer from the timezone resolver."""
    loading: bool = False
    zone: str | None = None


class WizardState(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(validate_assignment=True)

    step: int = TIMES_STEP
    allow_no_coverage: bool = False
    show_no_coverage_warning: bool = False

    @pydantic.field_validator('step')
    @classmethod
    def validate_step(cls, v: int) -> int:
        if v not in (TIMES_STEP, SHIFTS_STEP):
            raise ValueError('step must be 0 or 1')
        return v


TimezoneResolver = Callable[[str], Awaitable[ScheduleTimeZone]]
MutationTransport = Callable[[dict], Awaitable[None]]


class TempSchedWizard:
    """
    State machine behind the temporary schedule dialog.

    The rendering layer reports field edits and step requests, and reads
    `errors()`, `notices()` and `step_props()` back for display. Submission
    goes through `transport`, one request at a time.

    Args:
        schedule_id: Schedule the temporary schedule belongs to
        resolve_zone: Async callable returning the schedule's ScheduleTimeZone
        transport: Async callable that sends the mutation payload, raising MutationError on failure
        value: Existing temporary schedule to edit; omit to create a new one
        on_close: Called once when the wizard closes
        clock: Returns the current time, defaults to UTC now
    """

    def __init__(
        self,
        schedule_id: str,
        resolve_zone: TimezoneResolver,
        transport: MutationTransport,
        value: ScheduleDraft | dict | None = None,
        on_close: Callable[[], None] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.schedule_id = schedule_id
        self.edit = value is not None
        self.draft = ScheduleDraft.model_validate(value) if value is not None else ScheduleDraft()
        # edit starts on the 2nd step
        self.state = WizardState(step=SHIFTS_STEP if self.edit else TIMES_STEP)

        self.zone = None
        self.zone_loading = True
        self.pending = False
        self.closed = False
        self.mutation_error = None

        self._resolve_zone = resolve_zone
        self._transport = transport
        self._on_close = on_close
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def step(self) -> int:
        return self.state.step

    @property
    def ready(self) -> bool:
        """True once the schedule zone is known."""
        return not self.zone_loading and bool(self.zone)

    # zone

    async def load(self) -> None:
        """Fetch the schedule zone and fill in the default window once it is known."""
        result = await self._resolve_zone(self.schedule_id)
        if self.closed:
            return
        self.apply_zone(result)

    def apply_zone(self, result: ScheduleTimeZone) -> None:
        self.zone_loading = result.loading
        self.zone = None if result.loading else result.zone
        if not self.ready:
            logger.debug('Zone for schedule %s not ready yet', self.schedule_id)
            return

        if self.draft.start is None and self.draft.end is None:
            start, end = default_window(self._clock(), self.zone)
            self.draft = self.draft.model_copy(update={'start': start, 'end': end})
            logger.info('Using default window %s - %s for schedule %s', start, end, self.schedule_id)

    # edits

    def set_times(self, start: datetime | None, end: datetime | None) -> None:
        if self.pending:
            logger.warning('Ignoring time change while submission is pending')
            return
        self.draft = ScheduleDraft(start=start, end=end, shifts=self.draft.shifts)

    def set_shifts(self, shifts: Iterable[Shift | dict]) -> None:
        if self.pending:
            logger.warning('Ignoring shift change while submission is pending')
            return
        self.draft = ScheduleDraft(start=self.draft.start, end=self.draft.end, shifts=list(shifts))

    # transitions

    @property
    def can_next(self) -> bool:
        return self.step == TIMES_STEP

    @property
    def can_back(self) -> bool:
        if self.edit:
            return self.step != SHIFTS_STEP
        return self.step != TIMES_STEP

    def next(self) -> bool:
        if not self.can_next:
            return False
        self.state.step = self.step + 1
        return True

    def back(self) -> bool:
        if not self.can_back:
            return False
        self.state.step = self.step - 1
        return True

    def change_index(self, index: int) -> bool:
        """
        Handle an index change coming from outside the action buttons (e.g. a swipe).

        Out of range requests are ignored. While editing, the view is locked
        on the shifts step.

        Returns:
            False if the request was out of range, True otherwise
        """
        if index < 0 or index >= STEP_COUNT:
            logger.warning('Ignoring index change to %s', index)
            return False
        self.state.step = SHIFTS_STEP if self.edit else index
        return True

    def acknowledge_no_coverage(self, allow: bool) -> None:
        self.state.allow_no_coverage = allow

    # submission

    def payload(self) -> dict:
        return {
            **self.draft.model_dump(mode='json', by_alias=True),
            'scheduleID': self.schedule_id,
        }

    async def submit(self) -> bool:
        """
        Send the draft if it is ready to go.

        Coverage gaps hold the submission back until the user allows them with
        `acknowledge_no_coverage(True)` and submits again.

        Returns:
            True if the mutation was sent and succeeded
        """
        if self.closed or self.pending:
            logger.debug('Ignoring submit (closed=%s, pending=%s)', self.closed, self.pending)
            return False
        if self.step != SHIFTS_STEP:
            logger.debug('Ignoring submit on the times step')
            return False
        if not self.ready or not self.draft.is_complete:
            logger.warning('Cannot submit temporary schedule for %s before zone and times are set', self.schedule_id)
            return False

        if self.draft.is_inverted:
            logger.warning('Blocking submit for %s: end is before start', self.schedule_id)
            return False

        if find_invalid_shifts(self.draft, self.zone):
            logger.warning('Blocking submit for %s: shifts outside of window', self.schedule_id)
            return False

        if has_coverage_gaps(self.draft, self.zone) and not self.state.allow_no_coverage:
            self.state.show_no_coverage_warning = True
            logger.info('Holding submit for %s: coverage gaps not allowed yet', self.schedule_id)
            return False

        self.pending = True
        self.mutation_error = None
        try:
            await self._transport(self.payload())
        except MutationError as exc:
            logger.info('Temporary schedule for %s rejected: %s', self.schedule_id, exc)
            if not self.closed:
                self.mutation_error = exc
            return False
        except Exception as exc:
            logger.exception('Temporary schedule mutation for %s failed', self.schedule_id)
            if not self.closed:
                self.mutation_error = MutationError(non_field_errors=[str(exc) or type(exc).__name__])
            return False
        finally:
            self.pending = False

        logger.info('Temporary schedule for %s saved', self.schedule_id)
        self.close()
        return True

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close()

    # rendering

    def errors(self) -> list[FormError]:
        return collect_errors(
            self.draft,
            step=self.step,
            zone=self.zone if self.ready else None,
            show_no_coverage_warning=self.state.show_no_coverage_warning,
            mutation_error=self.mutation_error,
        )

    def notices(self) -> list[FormNotice]:
        return collect_notices(
            self.draft,
            now=self._clock(),
            edit=self.edit,
            zone=self.zone if self.ready else None,
        )

    def step_props(self) -> dict:
        """Props for the slide at the current step."""
        if self.step == TIMES_STEP:
            return {
                'schedule_id': self.schedule_id,
                'value': self.draft,
                'edit': self.edit,
            }
        return {
            'schedule_id': self.schedule_id,
            'value': self.draft.shifts,
            'start': self.draft.start,
            'end': self.draft.end,
            'edit': self.edit,
            'disabled': self.pending,
        }
