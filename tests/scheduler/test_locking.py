"""Tests for regeneration with locked cells."""

from dataclasses import replace

import pytest

from timetable_generator.models import HardConstraints, Subject, TimetableSettings
from timetable_generator.scheduler.grid import build_grid
from timetable_generator.scheduler.locking import (
    expand_blocks,
    lock_cells,
    locked_coordinates,
    parse_cell,
    partially_locked_blocks,
    regenerate_timetable,
    remaining_subjects,
)
from timetable_generator.scheduler.models import Day, TimeSlot, UnplacedReason


@pytest.fixture
def previous_slots(settings, subjects):
    """A hand-built week: OS on Monday 1-2, the lab on Wednesday 2-4, CN on Saturday 7."""
    by_id = {s.id: s for s in subjects}
    grid = build_grid(settings)
    grid.assign(grid.get(Day.MONDAY, 1), by_id["T1"])
    grid.assign(grid.get(Day.MONDAY, 2), by_id["T1"])
    for period in (2, 3, 4):
        grid.assign(grid.get(Day.WEDNESDAY, period), by_id["L1"])
    grid.assign(grid.get(Day.SATURDAY, 7), by_id["T2"])
    return grid.sorted_slots()


def _at(slots, day, period):
    return next(s for s in slots if s.day == day and s.period == period and not s.is_break)


class TestParseCell:
    def test_parse(self):
        assert parse_cell("Monday:2") == (Day.MONDAY, 2)
        assert parse_cell("saturday:7") == (Day.SATURDAY, 7)

    def test_missing_period(self):
        with pytest.raises(ValueError):
            parse_cell("Monday")

    def test_unknown_day(self):
        with pytest.raises(ValueError, match="Unknown day"):
            parse_cell("Sunday:1")


class TestLockCells:
    def test_marks_copies(self, previous_slots):
        locked = lock_cells(previous_slots, [(Day.MONDAY, 1)])

        assert _at(locked, Day.MONDAY, 1).locked
        assert not _at(previous_slots, Day.MONDAY, 1).locked
        assert locked_coordinates(locked) == {(Day.MONDAY, 1)}

    def test_break_never_locked(self):
        slots = [TimeSlot(day=Day.MONDAY, period=3.5, is_break=True, break_name="Tea Break")]
        assert not lock_cells(slots, [(Day.MONDAY, 3)])[0].locked


class TestRemainingSubjects:
    def test_regular_count_reduced(self, subjects):
        locked = [TimeSlot(day=Day.MONDAY, period=1, subject_id="T1", staff_id="S1", locked=True)]
        remaining = {s.id: s for s in remaining_subjects(subjects, locked)}
        assert remaining["T1"].periods_per_week == 4
        assert remaining["T2"].periods_per_week == 5

    def test_fully_locked_subject_dropped(self, subjects):
        locked = [
            TimeSlot(day=Day.TUESDAY, period=p, subject_id="T2", staff_id="S2", locked=True)
            for p in range(1, 6)
        ]
        assert "T2" not in {s.id for s in remaining_subjects(subjects, locked)}

    def test_lab_with_locked_cell_not_placed_again(self, subjects):
        locked = [TimeSlot(day=Day.MONDAY, period=1, subject_id="L1", staff_id="S3", locked=True)]
        assert "L1" not in {s.id for s in remaining_subjects(subjects, locked)}


class TestRegenerateTimetable:
    def test_locked_cells_kept(self, previous_slots, subjects, staff, settings):
        cells = [(Day.MONDAY, 1), (Day.WEDNESDAY, 2), (Day.WEDNESDAY, 3), (Day.WEDNESDAY, 4)]
        result = regenerate_timetable(
            previous_slots, subjects, staff, settings, locked=cells, seed=5
        )

        monday_first = _at(result.slots, Day.MONDAY, 1)
        assert monday_first.subject_id == "T1"
        assert monday_first.locked
        lab = [s for s in result.slots if s.subject_id == "L1"]
        assert [(s.day, s.period) for s in lab] == [
            (Day.WEDNESDAY, 2),
            (Day.WEDNESDAY, 3),
            (Day.WEDNESDAY, 4),
        ]

        stats = result.statistics
        assert stats.by_subject["T1"] == {"assigned": 5, "required": 5}
        assert stats.by_subject["T2"] == {"assigned": 5, "required": 5}
        assert stats.by_subject["L1"] == {"assigned": 3, "required": 3}
        assert stats.by_subject["ACT"] == {"assigned": 2, "required": 2}
        assert result.unplaced == []

    def test_locks_from_previous_slots(self, previous_slots, subjects, staff, settings):
        previous = lock_cells(previous_slots, [(Day.MONDAY, 2)])
        result = regenerate_timetable(previous, subjects, staff, settings, seed=6)

        assert _at(result.slots, Day.MONDAY, 2).subject_id == "T1"
        assert _at(result.slots, Day.MONDAY, 2).locked
        assert sum(1 for s in result.slots if s.locked) == 1

    def test_locked_activity_cell_skips_activity(self, previous_slots, subjects, staff, settings):
        result = regenerate_timetable(
            previous_slots, subjects, staff, settings, locked=[(Day.SATURDAY, 7)], seed=7
        )

        assert _at(result.slots, Day.SATURDAY, 7).subject_id == "T2"
        assert not any(s.subject_id == "ACT" for s in result.slots)
        activity = next(u for u in result.unplaced if u.subject_id == "ACT")
        assert activity.reason == UnplacedReason.ACTIVITY_SLOTS_LOCKED
        assert result.statistics.by_subject["T2"]["assigned"] == 5

    def test_locks_ignored_when_not_preserved(self, previous_slots, subjects, staff):
        settings = TimetableSettings(
            hard_constraints=HardConstraints(preserve_locked_slots=False)
        )
        result = regenerate_timetable(
            previous_slots, subjects, staff, settings, locked=[(Day.MONDAY, 1)], seed=8
        )
        assert not any(s.locked for s in result.slots)

    def test_same_seed_same_result(self, previous_slots, subjects, staff, settings):
        cells = [(Day.MONDAY, 1)]
        first = regenerate_timetable(previous_slots, subjects, staff, settings, locked=cells, seed=9)
        second = regenerate_timetable(previous_slots, subjects, staff, settings, locked=cells, seed=9)
        assert first.slots == second.slots


class TestLockedEmptyCells:
    def test_locked_empty_cell_stays_empty_in_full_week(self, settings, staff):
        empty_week = build_grid(settings).sorted_slots()
        demand = [
            Subject(id="T1", name="OS", short_name="OS", periods_per_week=42, staff_id="S1")
        ]

        result = regenerate_timetable(
            empty_week, demand, staff, settings, locked=[(Day.MONDAY, 1)], seed=0
        )

        cell = _at(result.slots, Day.MONDAY, 1)
        assert cell.subject_id is None
        assert cell.locked
        assert result.statistics.by_subject["T1"]["assigned"] == 41
        assert result.unplaced[0].subject_id == "T1"
        assert result.unplaced[0].missing == 1


class TestBlockLocks:
    def test_expand_blocks_grows_lab_only(self, previous_slots, subjects):
        cells = expand_blocks(
            previous_slots, [(Day.WEDNESDAY, 3), (Day.MONDAY, 1)], subjects
        )
        assert cells == {
            (Day.MONDAY, 1),
            (Day.WEDNESDAY, 2),
            (Day.WEDNESDAY, 3),
            (Day.WEDNESDAY, 4),
        }

    def test_lock_cells_without_subjects_does_not_expand(self, previous_slots):
        locked = lock_cells(previous_slots, [(Day.WEDNESDAY, 2)])
        assert locked_coordinates(locked) == {(Day.WEDNESDAY, 2)}

    def test_one_lab_cell_locks_whole_block(self, previous_slots, subjects, staff, settings):
        result = regenerate_timetable(
            previous_slots, subjects, staff, settings, locked=[(Day.WEDNESDAY, 2)], seed=3
        )

        lab = [s for s in result.slots if s.subject_id == "L1"]
        assert [(s.day, s.period) for s in lab] == [
            (Day.WEDNESDAY, 2),
            (Day.WEDNESDAY, 3),
            (Day.WEDNESDAY, 4),
        ]
        assert all(s.locked for s in lab)
        assert result.statistics.by_subject["L1"] == {"assigned": 3, "required": 3}
        assert not any(u.subject_id == "L1" for u in result.unplaced)

    def test_truncated_lab_lock_reported(self, previous_slots, subjects, staff, settings):
        truncated = [
            replace(s, subject_id=None, staff_id=None)
            if s.subject_id == "L1" and s.period != 2
            else s
            for s in previous_slots
        ]

        result = regenerate_timetable(
            truncated, subjects, staff, settings, locked=[(Day.WEDNESDAY, 2)], seed=3
        )

        shortfall = next(u for u in result.unplaced if u.subject_id == "L1")
        assert shortfall.reason == UnplacedReason.PARTIALLY_LOCKED
        assert shortfall.assigned == 1
        assert shortfall.missing == 2
        assert result.statistics.by_subject["L1"] == {"assigned": 1, "required": 3}

    def test_partially_locked_blocks(self, subjects):
        kept = [TimeSlot(day=Day.SATURDAY, period=7, subject_id="ACT", staff_id="S4", locked=True)]
        shortfalls = partially_locked_blocks(subjects, kept)
        assert [(u.subject_id, u.assigned, u.required) for u in shortfalls] == [("ACT", 1, 2)]


class TestUnlocking:
    def test_unlock_stored_cell(self, previous_slots, subjects, staff, settings):
        stored = lock_cells(previous_slots, [(Day.MONDAY, 1)])

        result = regenerate_timetable(
            stored, subjects, staff, settings, unlocked=[(Day.MONDAY, 1)], seed=4
        )

        assert not any(s.locked for s in result.slots)

    def test_unlock_one_lab_cell_releases_block(self, previous_slots, subjects, staff, settings):
        stored = lock_cells(previous_slots, [(Day.WEDNESDAY, 2)], subjects)
        assert len(locked_coordinates(stored)) == 3

        result = regenerate_timetable(
            stored, subjects, staff, settings, unlocked=[(Day.WEDNESDAY, 4)], seed=4
        )

        assert not any(s.locked for s in result.slots)
        assert result.statistics.by_subject["L1"]["assigned"] in (0, 3)

    def test_clear_locks_keeps_new_locks(self, previous_slots, subjects, staff, settings):
        stored = lock_cells(previous_slots, [(Day.MONDAY, 1), (Day.MONDAY, 2)])

        result = regenerate_timetable(
            stored,
            subjects,
            staff,
            settings,
            locked=[(Day.SATURDAY, 7)],
            clear_locks=True,
            seed=4,
        )

        assert locked_coordinates(result.slots) == {(Day.SATURDAY, 7)}
        assert _at(result.slots, Day.SATURDAY, 7).subject_id == "T2"
