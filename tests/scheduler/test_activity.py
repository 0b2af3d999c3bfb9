"""Tests for activity placement."""

from timetable_generator.models import Subject, TimetableSettings
from timetable_generator.scheduler.activity import activity_coordinates, place_activity
from timetable_generator.scheduler.conflicts import StaffTracker
from timetable_generator.scheduler.grid import build_grid
from timetable_generator.scheduler.models import Day


class TestActivityCoordinates:
    def test_last_two_periods_of_saturday(self):
        assert activity_coordinates(7) == [(Day.SATURDAY, 7), (Day.SATURDAY, 6)]

    def test_single_period_day(self):
        assert activity_coordinates(1) == [(Day.SATURDAY, 1)]


class TestPlaceActivity:
    def test_places_on_saturday_end(self, settings, activity_subject):
        grid = build_grid(settings)
        assert place_activity(grid, activity_subject) == 2

        assert grid.get(Day.SATURDAY, 6).subject_id == "ACT"
        assert grid.get(Day.SATURDAY, 7).subject_id == "ACT"
        assert grid.count_assigned("ACT") == 2

    def test_overwrites_existing_assignment(self, settings, activity_subject):
        grid = build_grid(settings)
        other = Subject(id="T1", name="OS", short_name="OS", periods_per_week=1, staff_id="S1")
        grid.assign(grid.get(Day.SATURDAY, 7), other)
        tracker = StaffTracker()
        tracker.seed_from_slots(grid.slots)

        place_activity(grid, activity_subject, tracker)

        assert grid.get(Day.SATURDAY, 7).subject_id == "ACT"
        assert tracker.is_staff_available("S1", Day.SATURDAY, 7)
        assert not tracker.is_staff_available("S4", Day.SATURDAY, 7)

    def test_no_activity(self, settings):
        grid = build_grid(settings)
        assert place_activity(grid, None) == 0
        assert all(slot.is_free for slot in grid.real_slots())

    def test_short_day(self, activity_subject):
        grid = build_grid(TimetableSettings(period_timings=["a", "b", "c"], breaks=[]))
        place_activity(grid, activity_subject)
        assert grid.get(Day.SATURDAY, 3).subject_id == "ACT"
        assert grid.get(Day.SATURDAY, 2).subject_id == "ACT"
        assert grid.get(Day.SATURDAY, 1).is_free
