"""Main timetable generator: labs, then activity, then regular subjects."""

import logging
import random
from collections import defaultdict
from collections.abc import Iterable

from ..models import Staff, Subject, TimetableSettings
from ..validators import validate_generation_input, validate_staff_references
from .activity import place_activity
from .conflicts import StaffTracker
from .distribution import distribute_subjects
from .grid import TimetableGrid, build_grid
from .labs import place_labs
from .models import DAYS, GenerationResult, GenerationStatistics, TimeSlot
from .utils import make_rng, sort_subjects_by_priority, split_subjects

logger = logging.getLogger(__name__)


class TimetableGenerator:
    """Greedy, randomized weekly timetable generator.

    The pipeline runs three placement phases over one grid:
    1. Labs: one contiguous block each, Monday to Friday, dropped if it does not fit
    2. Activity: the last two periods of Saturday
    3. Regular subjects: random probes honoring staff non-overlap, then a
       deterministic force-fill of whatever is left

    Infeasibility never raises. The result lists unplaced subjects and the
    statistics count unassigned periods.
    """

    def __init__(
        self,
        settings: TimetableSettings | None = None,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            settings: Grid shape and constraint toggles. Defaults to the
                      seven-period day with tea and lunch breaks.
            seed: Seed for a private random source (ignored if rng is given)
            rng: Random source to use
        """
        self.settings = settings or TimetableSettings()
        self.seed = seed
        self.rng = make_rng(seed, rng)

    def generate(
        self,
        subjects: list[Subject],
        staff: list[Staff],
        grid: TimetableGrid | None = None,
        busy_slots: Iterable[TimeSlot] | None = None,
    ) -> GenerationResult:
        """
        Generate a weekly timetable.

        Args:
            subjects: Subjects to place
            staff: Staff list (names for the summary, advisory daily limits)
            grid: Starting grid; occupied cells are left alone. A fresh empty
                  grid is built when omitted.
            busy_slots: Slots from other sections' drafts whose staff
                        bookings must be respected during random placement

        Returns:
            GenerationResult with the sorted slot list

        Raises:
            ValidationError: If subjects or settings are malformed
        """
        validate_generation_input(subjects, self.settings)
        for warning in validate_staff_references(subjects, staff):
            logger.warning(warning)

        hard = self.settings.hard_constraints
        soft = self.settings.soft_constraints
        for flag in soft.inert_flags():
            logger.debug(f"Soft constraint '{flag}' is enabled but does not affect placement")

        if grid is None:
            grid = build_grid(self.settings)

        logger.info(
            f"Starting timetable generation with {len(subjects)} subjects, "
            f"{len(staff)} staff, {len(DAYS)} days, {grid.periods_per_day} periods per day"
        )

        tracker = StaffTracker()
        tracker.seed_from_slots(grid.slots)
        if busy_slots is not None:
            tracker.seed_from_slots(busy_slots)

        labs, activity, regular = split_subjects(subjects)
        if soft.priority_scheduling:
            regular = sort_subjects_by_priority(regular)

        unplaced = place_labs(grid, labs, self.rng, tracker)
        place_activity(grid, activity, tracker)
        unplaced += distribute_subjects(
            grid,
            regular,
            self.rng,
            tracker,
            check_staff=hard.no_teacher_overlap,
            force=hard.exact_subject_counts,
        )

        slots = grid.sorted_slots()
        statistics = compute_statistics(slots, subjects, staff, grid.periods_per_day)
        log_summary(statistics)

        return GenerationResult(
            slots=slots,
            unplaced=unplaced,
            statistics=statistics,
            seed=self.seed,
        )


def generate_timetable(
    subjects: list[Subject],
    staff: list[Staff],
    settings: TimetableSettings,
    rng: random.Random | None = None,
) -> list[TimeSlot]:
    """Generate a timetable and return just the sorted slot list.

    Use TimetableGenerator directly to get unplaced subjects and statistics.
    """
    return TimetableGenerator(settings, rng=rng).generate(subjects, staff).slots


def compute_statistics(
    slots: list[TimeSlot],
    subjects: list[Subject],
    staff: list[Staff],
    periods_per_day: int,
) -> GenerationStatistics:
    """Summarize a grid: assignment counts, gaps and advisory staff overloads."""
    real_slots = [s for s in slots if not s.is_break]
    assigned = [s for s in real_slots if s.subject_id is not None]
    unassigned = [s for s in real_slots if s.subject_id is None]

    by_subject = {}
    for subject in subjects:
        count = sum(1 for s in assigned if s.subject_id == subject.id)
        by_subject[subject.id] = {
            "assigned": count,
            "required": subject.periods_per_week,
        }

    daily_load: dict[tuple[str, str], int] = defaultdict(int)
    for slot in assigned:
        if slot.staff_id is not None:
            daily_load[(slot.staff_id, slot.day.label)] += 1

    overloads = []
    for member in staff:
        if member.max_periods_per_day is None:
            continue
        for day in DAYS:
            load = daily_load[(member.id, day.label)]
            if load > member.max_periods_per_day:
                overloads.append(
                    f"{member.name} has {load} periods on {day.label} "
                    f"(max {member.max_periods_per_day})"
                )

    return GenerationStatistics(
        days=[day.label for day in DAYS],
        periods_per_day=periods_per_day,
        expected_slots=len(DAYS) * periods_per_day,
        assigned_periods=len(assigned),
        unassigned_periods=len(unassigned),
        unassigned_slots=[(s.day.label, int(s.period)) for s in unassigned],
        by_subject=by_subject,
        staff_overloads=overloads,
    )


def log_summary(statistics: GenerationStatistics) -> None:
    """Log the end-of-run summary."""
    logger.info(
        f"Timetable summary: {statistics.assigned_periods} assigned, "
        f"{statistics.unassigned_periods} unassigned of {statistics.expected_slots} slots"
    )
    for day, period in statistics.unassigned_slots:
        logger.debug(f"  Unassigned: {day}, period {period}")
    for subject_id, counts in statistics.by_subject.items():
        if counts["assigned"] != counts["required"]:
            logger.info(
                f"  Subject {subject_id}: assigned {counts['assigned']}/{counts['required']}"
            )
    for overload in statistics.staff_overloads:
        logger.warning(f"  Staff overload: {overload}")
