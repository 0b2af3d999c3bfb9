"""Test fixtures for timetable generator tests."""

import random

import pytest

from timetable_generator.models import Staff, Subject, TimetableSettings
from timetable_generator.scheduler.models import Day, TimeSlot, TimetableDraft


@pytest.fixture
def rng():
    """Seeded random source for deterministic runs."""
    return random.Random(1234)


@pytest.fixture
def settings():
    """Default settings: seven periods, tea break after 3, lunch after 5."""
    return TimetableSettings()


@pytest.fixture
def staff():
    return [
        Staff(id="S1", name="Dr. Kumar", max_periods_per_day=4),
        Staff(id="S2", name="Prof. Rao"),
        Staff(id="S3", name="Ms. Devi"),
        Staff(id="S4", name="Mr. Iyer"),
    ]


@pytest.fixture
def lab_subject():
    return Subject(
        id="L1",
        name="Data Structures Lab",
        short_name="DS LAB",
        periods_per_week=3,
        staff_id="S3",
        is_lab=True,
    )


@pytest.fixture
def activity_subject():
    return Subject(
        id="ACT",
        name="Department Activity Hour",
        short_name="ACTIVITY",
        periods_per_week=2,
        staff_id="S4",
    )


@pytest.fixture
def subjects(lab_subject, activity_subject):
    """One lab, the activity subject and two theory subjects."""
    return [
        lab_subject,
        activity_subject,
        Subject(
            id="T1",
            name="Operating Systems",
            short_name="OS",
            periods_per_week=5,
            staff_id="S1",
            priority=1,
        ),
        Subject(
            id="T2",
            name="Computer Networks",
            short_name="CN",
            periods_per_week=5,
            staff_id="S2",
            priority=2,
        ),
    ]


@pytest.fixture
def make_draft():
    """Build a draft from (day, period, subject_id, staff_id) tuples."""

    def _make(section: str, entries: list[tuple[Day, int, str, str | None]]) -> TimetableDraft:
        return TimetableDraft(
            id=f"3_CSE_{section}_draft",
            name=f"3 Year CSE Section {section} Draft",
            year="3",
            dept="CSE",
            section=section,
            time_slots=[
                TimeSlot(day=day, period=period, subject_id=subject_id, staff_id=staff_id)
                for day, period, subject_id, staff_id in entries
            ],
        )

    return _make
