"""Regular subject distribution: random placement with a force-fill fallback."""

import logging
import random

from ..constants import MAX_FAILED_ATTEMPTS
from ..models import Subject
from .conflicts import StaffTracker
from .grid import TimetableGrid
from .models import DAYS, UnplacedReason, UnplacedSubject

logger = logging.getLogger(__name__)


def place_randomly(
    grid: TimetableGrid,
    subject: Subject,
    rng: random.Random,
    tracker: StaffTracker,
    required: int,
    check_staff: bool = True,
    max_failures: int = MAX_FAILED_ATTEMPTS,
) -> int:
    """Probe random (day, period) slots until placed or out of attempts.

    A probe fails when the slot is taken or, with ``check_staff``, when the
    subject's staff member is already booked at that time. Failures are
    counted per subject, not reset on success.

    Returns:
        Number of periods assigned
    """
    assigned = 0
    failures = 0

    while assigned < required and failures < max_failures:
        day = DAYS[rng.randrange(len(DAYS))]
        period = rng.randint(1, grid.periods_per_day)
        slot = grid.get(day, period)

        if slot is None or not slot.is_free:
            failures += 1
            continue

        if check_staff and not tracker.is_staff_available(subject.staff_id, day, period):
            failures += 1
            continue

        grid.assign(slot, subject)
        tracker.reserve(subject.staff_id, day, period)
        assigned += 1

    return assigned


def force_fill(
    grid: TimetableGrid,
    subject: Subject,
    tracker: StaffTracker,
    required: int,
) -> int:
    """Fill free slots in (day, period) order without the staff check.

    This can double-book a staff member; conflict detection across drafts
    reports it afterwards.

    Returns:
        Number of periods assigned
    """
    assigned = 0
    for slot in grid.free_slots():
        if assigned >= required:
            break
        if not tracker.is_staff_available(subject.staff_id, slot.day, int(slot.period)):
            logger.debug(
                f"Force-filling {subject.short_name} double-books staff "
                f"{subject.staff_id} on {slot.day.label} period {int(slot.period)}"
            )
        grid.assign(slot, subject)
        tracker.reserve(subject.staff_id, slot.day, int(slot.period))
        assigned += 1
    return assigned


def distribute_subjects(
    grid: TimetableGrid,
    subjects: list[Subject],
    rng: random.Random,
    tracker: StaffTracker | None = None,
    check_staff: bool = True,
    force: bool = True,
) -> list[UnplacedSubject]:
    """Distribute regular subjects over the whole week.

    Subjects are processed in the given order, each sharing the same grid.

    Args:
        grid: Grid to fill (mutated)
        subjects: Regular subjects, already ordered
        rng: Random source
        tracker: Staff bookings; a fresh one seeded from the grid if omitted
        check_staff: Enforce staff non-overlap during random placement
        force: Force-fill periods left after random placement

    Returns:
        Subjects that still lack periods
    """
    if tracker is None:
        tracker = StaffTracker()
        tracker.seed_from_slots(grid.slots)

    unplaced: list[UnplacedSubject] = []
    for subject in subjects:
        required = subject.periods_per_week
        assigned = place_randomly(grid, subject, rng, tracker, required, check_staff)

        if assigned < required and force:
            assigned += force_fill(grid, subject, tracker, required - assigned)

        logger.info(f"Assigned {assigned}/{required} periods for {subject.name}")

        if assigned < required:
            reason = (
                UnplacedReason.NO_FREE_SLOTS
                if force
                else UnplacedReason.RANDOM_ATTEMPTS_EXHAUSTED
            )
            unplaced.append(
                UnplacedSubject(
                    subject_id=subject.id,
                    subject_name=subject.name,
                    required=required,
                    assigned=assigned,
                    reason=reason,
                    details=f"{required - assigned} period(s) left unassigned",
                )
            )

    return unplaced
