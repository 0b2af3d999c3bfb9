"""Tests for regular subject distribution."""

import random

from timetable_generator.models import Subject, TimetableSettings
from timetable_generator.scheduler.conflicts import StaffTracker
from timetable_generator.scheduler.distribution import (
    distribute_subjects,
    force_fill,
    place_randomly,
)
from timetable_generator.scheduler.grid import build_grid
from timetable_generator.scheduler.models import DAYS, Day, UnplacedReason


def _subject(subject_id: str, periods: int, staff_id: str | None = "S1") -> Subject:
    return Subject(
        id=subject_id,
        name=f"Subject {subject_id}",
        short_name=subject_id,
        periods_per_week=periods,
        staff_id=staff_id,
    )


def _small_settings(periods: int = 2) -> TimetableSettings:
    return TimetableSettings(period_timings=[f"p{i}" for i in range(periods)], breaks=[])


class TestPlaceRandomly:
    def test_places_requested_periods_on_empty_grid(self, settings, rng):
        grid = build_grid(settings)
        subject = _subject("T1", 5)
        assigned = place_randomly(grid, subject, rng, StaffTracker(), 5)

        assert assigned == 5
        assert grid.count_assigned("T1") == 5

    def test_respects_staff_bookings(self, settings, rng):
        grid = build_grid(settings)
        tracker = StaffTracker()
        busy = {(day, period) for day in DAYS for period in range(1, 7)}
        for day, period in busy:
            tracker.reserve("S1", day, period)

        assigned = place_randomly(grid, _subject("T1", 3), rng, tracker, 3)

        for slot in grid.slots_for_subject("T1"):
            assert (slot.day, int(slot.period)) not in busy
        assert assigned <= 3

    def test_ignores_staff_when_check_disabled(self, rng):
        grid = build_grid(_small_settings(1))
        tracker = StaffTracker()
        for day in DAYS:
            tracker.reserve("S1", day, 1)

        assigned = place_randomly(
            grid, _subject("T1", 6), rng, tracker, 6, check_staff=False, max_failures=1000
        )
        assert assigned == 6

    def test_gives_up_after_failures(self, rng):
        grid = build_grid(_small_settings(1))
        blocker = _subject("X", 6, staff_id=None)
        for slot in grid.real_slots():
            grid.assign(slot, blocker)

        assert place_randomly(grid, _subject("T1", 2), rng, StaffTracker(), 2) == 0


class TestForceFill:
    def test_fills_in_day_period_order(self):
        grid = build_grid(_small_settings(2))
        grid.assign(grid.get(Day.MONDAY, 1), _subject("X", 1, staff_id=None))

        assigned = force_fill(grid, _subject("T1", 3), StaffTracker(), 3)

        assert assigned == 3
        assert [s.coordinate for s in grid.slots_for_subject("T1")] == [
            (Day.MONDAY, 2),
            (Day.TUESDAY, 1),
            (Day.TUESDAY, 2),
        ]

    def test_double_books_staff(self):
        grid = build_grid(_small_settings(1))
        tracker = StaffTracker()
        tracker.reserve("S1", Day.MONDAY, 1)

        force_fill(grid, _subject("T1", 1), tracker, 1)

        assert grid.get(Day.MONDAY, 1).subject_id == "T1"
        assert tracker.staff_schedule[(Day.MONDAY, 1)]["S1"] == 2

    def test_stops_when_grid_full(self):
        grid = build_grid(_small_settings(1))
        assert force_fill(grid, _subject("T1", 10), StaffTracker(), 10) == 6


class TestDistributeSubjects:
    def test_exact_counts(self, settings, rng):
        grid = build_grid(settings)
        subjects = [_subject("T1", 5, "S1"), _subject("T2", 5, "S2")]
        unplaced = distribute_subjects(grid, subjects, rng)

        assert unplaced == []
        assert grid.count_assigned("T1") == 5
        assert grid.count_assigned("T2") == 5

    def test_shortfall_reported_when_grid_full(self, rng):
        grid = build_grid(_small_settings(1))
        unplaced = distribute_subjects(grid, [_subject("T1", 4), _subject("T2", 4, "S2")], rng)

        assert grid.count_assigned("T1") == 4
        assert grid.count_assigned("T2") == 2
        assert len(unplaced) == 1
        assert unplaced[0].subject_id == "T2"
        assert unplaced[0].missing == 2
        assert unplaced[0].reason == UnplacedReason.NO_FREE_SLOTS

    def test_no_force_fill_reports_random_exhaustion(self, rng):
        grid = build_grid(_small_settings(1))
        tracker = StaffTracker()
        for day in DAYS:
            tracker.reserve("S1", day, 1)

        unplaced = distribute_subjects(grid, [_subject("T1", 2)], rng, tracker, force=False)

        assert grid.count_assigned("T1") == 0
        assert unplaced[0].reason == UnplacedReason.RANDOM_ATTEMPTS_EXHAUSTED

    def test_deterministic_for_same_seed(self, settings):
        subjects = [_subject("T1", 5, "S1"), _subject("T2", 4, "S2")]
        first = build_grid(settings)
        second = build_grid(settings)
        distribute_subjects(first, subjects, random.Random(99))
        distribute_subjects(second, subjects, random.Random(99))
        assert [s.subject_id for s in first.sorted_slots()] == [
            s.subject_id for s in second.sorted_slots()
        ]
