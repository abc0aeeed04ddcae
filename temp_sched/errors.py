"""Exceptions raised by the temporary schedule core."""

from dataclasses import dataclass


class TempScheduleError(Exception):
    """Base exception for the temporary schedule core."""
    pass


class InvalidInterval(TempScheduleError):
    """Raised when an interval ends before it starts."""

    def __init__(self, start, end):
        super().__init__(f'interval end {end} is before start {start}')
        self.start = start
        self.end = end


class ZoneNotReady(TempScheduleError):
    """Raised when a zone-dependent computation runs before the zone is known."""
    pass


class UnknownTimeZone(TempScheduleError):
    """Raised when the schedule zone name cannot be resolved."""
    pass


class DraftIncomplete(TempScheduleError):
    """Raised when the draft window is read before both bounds are set."""
    pass


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


class MutationError(TempScheduleError):
    """Structured failure returned by the mutation transport.

    Field errors are attached to a single input; non-field errors are shown
    for the whole form.
    """

    def __init__(self, non_field_errors: list[str] | None = None, field_errors: list[FieldError] | None = None):
        self.non_field_errors = list(non_field_errors or [])
        self.field_errors = list(field_errors or [])
        super().__init__('; '.join(self.messages()) or 'mutation failed')

    def messages(self) -> list[str]:
        return self.non_field_errors + [f'{e.field}: {e.message}' for e in self.field_errors]
