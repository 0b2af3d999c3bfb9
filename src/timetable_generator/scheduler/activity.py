"""Activity placement: the last two periods of the week."""

import logging

from ..constants import ACTIVITY_PERIODS
from ..models import Subject
from .conflicts import StaffTracker
from .grid import TimetableGrid
from .models import DAYS, Day

logger = logging.getLogger(__name__)


def activity_coordinates(periods_per_day: int) -> list[tuple[Day, int]]:
    """Coordinates reserved for the activity subject, last period first.

    Periods below 1 (when a day has a single period) are left out.
    """
    last_day = DAYS[-1]
    periods = [periods_per_day - offset for offset in range(ACTIVITY_PERIODS)]
    return [(last_day, period) for period in periods if period >= 1]


def place_activity(
    grid: TimetableGrid,
    activity: Subject | None,
    tracker: StaffTracker | None = None,
) -> int:
    """Place the activity subject on the last two periods of the last day.

    Whatever is already in those slots is overwritten.

    Returns:
        Number of periods assigned
    """
    if activity is None:
        return 0

    assigned = 0
    for day, period in activity_coordinates(grid.periods_per_day):
        slot = grid.get(day, period)
        if slot is None:
            continue
        if tracker is not None:
            tracker.release(slot.staff_id, day, period)
            tracker.reserve(activity.staff_id, day, period)
        grid.assign(slot, activity)
        assigned += 1
        logger.debug(f"Assigned activity period to {day.label}, period {period}")

    return assigned
