#!/usr/bin/env python3
"""
Simple example walking through the temporary schedule wizard.
Alice and Bob cover most of next week, leaving a gap that has to be allowed.
"""

from datetime import datetime, timedelta, timezone
import asyncio
import logging
import sys
import os

# Add parent directory to path so we can import temp_sched
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from temp_sched import TempSchedWizard, ScheduleTimeZone, Shift, get_coverage_gaps
from temp_sched.config import settings
import json


async def resolve_zone(schedule_id):
    return ScheduleTimeZone(loading=False, zone="Europe/London")


async def send_mutation(payload):
    print(json.dumps(payload, indent=2))


async def main():
    logging.basicConfig(level=settings.LOG_LEVEL, format='%(levelname)s %(name)s: %(message)s')

    wizard = TempSchedWizard(
        "primary-rotation",
        resolve_zone,
        send_mutation,
        on_close=lambda: print("Wizard closed"),
        clock=lambda: datetime(2025, 11, 5, 12, 0, tzinfo=timezone.utc),
    )
    await wizard.load()
    print(f"Window: {wizard.draft.start:%a %b %d %H:%M} → {wizard.draft.end:%a %b %d %H:%M}")

    wizard.next()

    # Alice covers Sunday to Wednesday, Bob Thursday to Sunday; Wednesday night is open
    start = wizard.draft.start
    wizard.set_shifts([
        Shift(userID="alice", start=start, end=start + timedelta(days=3, hours=18)),
        Shift(userID="bob", start=start + timedelta(days=4), end=wizard.draft.end),
    ])

    for gap in get_coverage_gaps(wizard.draft.interval, wizard.draft.shifts, wizard.zone):
        hours = (gap.end - gap.start).total_seconds() / 3600
        print(f"{'gap':8} | {gap.start:%a %b %d, %I:%M %p} → {gap.end:%a %b %d, %I:%M %p} ({hours:.1f} hours)")

    if not await wizard.submit():
        for error in wizard.errors():
            print(f"! {error.message}")

    wizard.acknowledge_no_coverage(True)
    await wizard.submit()


if __name__ == '__main__':
    asyncio.run(main())
