"""Lab placement: one contiguous block per lab on a weekday."""

import logging
import random

from ..constants import LAB_START_PERIOD_COUNT, LAB_START_PERIOD_RANGE
from ..models import Subject
from .conflicts import StaffTracker
from .grid import TimetableGrid
from .models import DAYS, LAB_DAYS, UnplacedReason, UnplacedSubject
from .utils import random_permutation

logger = logging.getLogger(__name__)


def build_lab_day_pool(lab_count: int, rng: random.Random) -> list[int]:
    """Day indices for labs: a permutation of 0..lab_count truncated to lab_count."""
    return random_permutation(lab_count + 1, rng)[:lab_count]


def build_lab_period_pool(rng: random.Random) -> list[int]:
    """Four distinct 1-based start periods drawn from the first six, ascending."""
    picks = random_permutation(LAB_START_PERIOD_RANGE, rng)[:LAB_START_PERIOD_COUNT]
    return sorted(p + 1 for p in picks)


def place_labs(
    grid: TimetableGrid,
    labs: list[Subject],
    rng: random.Random,
    tracker: StaffTracker | None = None,
) -> list[UnplacedSubject]:
    """Place every lab as one contiguous block.

    Lab ``i`` is tried once, on ``day_pool[i % len(day_pool)]`` starting at
    ``period_pool[i % len(period_pool)]``. A lab that does not fit there is
    dropped, not retried.

    Args:
        grid: Grid to fill (mutated)
        labs: Lab subjects, in input order
        rng: Random source
        tracker: Staff bookings to update for placed labs

    Returns:
        Labs that could not be placed
    """
    if not labs:
        return []

    day_pool = build_lab_day_pool(len(labs), rng)
    period_pool = build_lab_period_pool(rng)
    logger.debug(f"Lab day pool: {day_pool}, start period pool: {period_pool}")

    unplaced: list[UnplacedSubject] = []
    for index, lab in enumerate(labs):
        day_index = day_pool[index % len(day_pool)]
        start = period_pool[index % len(period_pool)]
        length = lab.periods_per_week

        failure = _check_lab_fit(grid, day_index, start, length)
        if failure is not None:
            reason, details = failure
            logger.warning(f"Could not place lab {lab.short_name}: {details}")
            unplaced.append(
                UnplacedSubject(
                    subject_id=lab.id,
                    subject_name=lab.name,
                    required=length,
                    assigned=0,
                    reason=reason,
                    details=details,
                )
            )
            continue

        day = LAB_DAYS[day_index]
        for period in range(start, start + length):
            slot = grid.get(day, period)
            grid.assign(slot, lab)
            if tracker is not None:
                tracker.reserve(lab.staff_id, day, period)
        logger.debug(
            f"Placed lab {lab.short_name} on {day.label}, "
            f"periods {start}-{start + length - 1}"
        )

    return unplaced


def _check_lab_fit(
    grid: TimetableGrid, day_index: int, start: int, length: int
) -> tuple[UnplacedReason, str] | None:
    """Return (reason, details) when the block does not fit, None when it does."""
    if day_index >= len(LAB_DAYS):
        day_name = DAYS[day_index].label if day_index < len(DAYS) else f"day {day_index}"
        return UnplacedReason.NO_LAB_DAY, f"{day_name} is not a lab day"

    day = LAB_DAYS[day_index]
    if start + length - 1 > grid.periods_per_day:
        return UnplacedReason.LAB_TOO_LONG, (
            f"{length} periods from period {start} on {day.label} "
            f"exceed {grid.periods_per_day} periods per day"
        )

    if not grid.is_range_free(day, start, length):
        return UnplacedReason.LAB_SLOTS_OCCUPIED, (
            f"periods {start}-{start + length - 1} on {day.label} are not free"
        )

    return None
