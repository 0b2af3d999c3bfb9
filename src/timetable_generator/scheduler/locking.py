"""Regeneration that keeps locked cells.

The generator knows nothing about locks. This module sits on the caller side:
it pre-fills locked coordinates into a fresh grid, trims subject counts by
what the locked cells already cover, runs the generator on the rest and hands
back a grid that still carries the locked cells.

Labs and the activity subject are locked as whole blocks: locking (or
unlocking) any cell of a block locks (or unlocks) every cell of it on that day.
"""

import logging
import random
from collections import Counter
from collections.abc import Iterable
from dataclasses import replace

from ..models import Staff, Subject, TimetableSettings
from .activity import activity_coordinates
from .generator import TimetableGenerator, compute_statistics
from .grid import build_grid
from .models import Day, GenerationResult, TimeSlot, UnplacedReason, UnplacedSubject

logger = logging.getLogger(__name__)

Cell = tuple[Day, int]


def parse_cell(value: str) -> Cell:
    """Parse 'Monday:2' into (Day.MONDAY, 2)."""
    day_part, _, period_part = value.partition(":")
    if not period_part:
        raise ValueError(f"Expected DAY:PERIOD, got {value!r}")
    return Day.from_label(day_part), int(period_part)


def expand_blocks(
    slots: list[TimeSlot], cells: Iterable[Cell], subjects: list[Subject] | None = None
) -> set[Cell]:
    """Grow each cell holding a lab or the activity to its whole block on that day."""
    block_ids = {s.id for s in subjects or [] if s.is_lab or s.is_activity}
    by_coord = {(s.day, int(s.period)): s.subject_id for s in slots if not s.is_break}

    expanded: set[Cell] = set()
    for day, period in cells:
        period = int(period)
        expanded.add((day, period))
        subject_id = by_coord.get((day, period))
        if subject_id is None or subject_id not in block_ids:
            continue
        for step in (-1, 1):
            neighbour = period + step
            while by_coord.get((day, neighbour)) == subject_id:
                expanded.add((day, neighbour))
                neighbour += step
    return expanded


def lock_cells(
    slots: list[TimeSlot], cells: Iterable[Cell], subjects: list[Subject] | None = None
) -> list[TimeSlot]:
    """Return copies of slots where exactly the given non-break cells are locked.

    With ``subjects``, lab and activity cells are expanded to their blocks.
    """
    wanted = expand_blocks(slots, cells, subjects)
    return [
        replace(slot, locked=not slot.is_break and (slot.day, int(slot.period)) in wanted)
        for slot in slots
    ]


def locked_coordinates(slots: list[TimeSlot]) -> set[Cell]:
    return {(slot.day, int(slot.period)) for slot in slots if slot.locked and not slot.is_break}


def remaining_subjects(
    subjects: list[Subject], locked_slots: list[TimeSlot]
) -> list[Subject]:
    """Subjects still to place once locked cells are kept.

    Regular subjects lose one period per locked occurrence. A lab or the
    activity subject with any locked cell is kept as-is and not placed again.
    """
    locked_counts = Counter(s.subject_id for s in locked_slots if s.subject_id is not None)
    remaining = []
    for subject in subjects:
        already = locked_counts.get(subject.id, 0)
        if already == 0:
            remaining.append(subject)
            continue
        if subject.is_lab or subject.is_activity:
            continue
        left = subject.periods_per_week - already
        if left > 0:
            remaining.append(replace(subject, periods_per_week=left))
    return remaining


def partially_locked_blocks(
    subjects: list[Subject], locked_slots: list[TimeSlot]
) -> list[UnplacedSubject]:
    """Labs and the activity whose locked cells cover only part of their periods."""
    locked_counts = Counter(s.subject_id for s in locked_slots if s.subject_id is not None)
    shortfalls = []
    for subject in subjects:
        if not (subject.is_lab or subject.is_activity):
            continue
        held = locked_counts.get(subject.id, 0)
        if 0 < held < subject.periods_per_week:
            shortfalls.append(
                UnplacedSubject(
                    subject_id=subject.id,
                    subject_name=subject.name,
                    required=subject.periods_per_week,
                    assigned=held,
                    reason=UnplacedReason.PARTIALLY_LOCKED,
                    details=f"only {held} locked period(s) kept; the block is not placed again",
                )
            )
    return shortfalls


def regenerate_timetable(
    previous_slots: list[TimeSlot],
    subjects: list[Subject],
    staff: list[Staff],
    settings: TimetableSettings,
    locked: Iterable[Cell] | None = None,
    rng: random.Random | None = None,
    seed: int | None = None,
    unlocked: Iterable[Cell] | None = None,
    clear_locks: bool = False,
) -> GenerationResult:
    """Regenerate a timetable, keeping locked cells where they are.

    Args:
        previous_slots: Slots of the current timetable
        subjects: Full subject list
        staff: Staff list
        settings: Settings; locks are ignored unless
                  ``hard_constraints.preserve_locked_slots`` is set
        locked: Extra cells to lock, on top of slots already flagged locked
        rng: Random source
        seed: Seed used when rng is not given
        unlocked: Cells to release from the locks carried by previous_slots
        clear_locks: Drop every lock carried by previous_slots

    Returns:
        GenerationResult whose slots include the locked cells (flagged locked)
    """
    generator = TimetableGenerator(settings, seed=seed, rng=rng)

    if not settings.hard_constraints.preserve_locked_slots:
        logger.info("Locked slots are not preserved; regenerating from scratch")
        return generator.generate(subjects, staff)

    carried = set() if clear_locks else locked_coordinates(previous_slots)
    wanted = expand_blocks(previous_slots, carried | set(locked or []), subjects)
    wanted -= expand_blocks(previous_slots, unlocked or [], subjects)
    previous_slots = lock_cells(previous_slots, wanted)

    grid = build_grid(settings)
    kept: list[TimeSlot] = []
    for slot in previous_slots:
        if not slot.locked or slot.is_break:
            continue
        target = grid.get(slot.day, int(slot.period))
        if target is None:
            logger.warning(
                f"Locked cell {slot.day.label} period {slot.period} is outside the grid"
            )
            continue
        target.subject_id = slot.subject_id
        target.staff_id = slot.staff_id
        target.locked = True
        kept.append(target)

    logger.info(f"Regenerating with {len(kept)} locked cell(s)")

    to_place = remaining_subjects(subjects, kept)
    unplaced = partially_locked_blocks(subjects, kept)
    for shortfall in unplaced:
        logger.warning(f"{shortfall.subject_name}: {shortfall.details}")

    # Activity placement overwrites its cells, so it must not land on a lock
    locked_cells = {(s.day, int(s.period)) for s in kept}
    activity = next((s for s in to_place if s.is_activity), None)
    if activity is not None and locked_cells & set(activity_coordinates(grid.periods_per_day)):
        logger.warning(f"Activity cells are locked; {activity.short_name} not placed")
        to_place = [s for s in to_place if s.id != activity.id]
        unplaced.append(
            UnplacedSubject(
                subject_id=activity.id,
                subject_name=activity.name,
                required=activity.periods_per_week,
                assigned=0,
                reason=UnplacedReason.ACTIVITY_SLOTS_LOCKED,
                details="the last periods of the week are locked",
            )
        )

    result = generator.generate(to_place, staff, grid=grid)
    result.unplaced = unplaced + result.unplaced

    # Statistics against the full subject list, locked periods included
    result.statistics = compute_statistics(
        result.slots, subjects, staff, grid.periods_per_day
    )
    return result
