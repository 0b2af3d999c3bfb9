"""Data models for the weekly timetable grid and its results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Self

from ..constants import CONFLICT_STAFF


class Day(Enum):
    """Days of the teaching week."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5  # Regular and activity periods only, no labs

    @property
    def label(self) -> str:
        """Display label, e.g. 'Monday'."""
        return self.name.capitalize()

    @classmethod
    def from_label(cls, value: "str | Day") -> "Day":
        """Parse 'Monday', 'monday' or 'MONDAY'."""
        if isinstance(value, Day):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown day: {value!r}") from None


# All scheduling days, in order
DAYS = list(Day)

# Labs are restricted to weekdays
LAB_DAYS = [Day.MONDAY, Day.TUESDAY, Day.WEDNESDAY, Day.THURSDAY, Day.FRIDAY]


class UnplacedReason(str, Enum):
    """Reasons why a subject did not receive all of its periods."""

    LAB_TOO_LONG = "lab_too_long"
    LAB_SLOTS_OCCUPIED = "lab_slots_occupied"
    NO_LAB_DAY = "no_lab_day"
    ACTIVITY_SLOTS_LOCKED = "activity_slots_locked"
    PARTIALLY_LOCKED = "partially_locked"
    RANDOM_ATTEMPTS_EXHAUSTED = "random_attempts_exhausted"
    NO_FREE_SLOTS = "no_free_slots"


@dataclass
class TimeSlot:
    """One cell of the weekly grid.

    Real periods are 1-based integers. Break markers use ``after + 0.5`` so
    they sort between real periods; they never carry a subject.
    """

    day: Day
    period: float
    subject_id: str | None = None
    staff_id: str | None = None
    is_break: bool = False
    break_name: str | None = None
    locked: bool = False

    @property
    def is_free(self) -> bool:
        """True for an unassigned, unlocked, non-break slot."""
        return not self.is_break and not self.locked and self.subject_id is None

    @property
    def coordinate(self) -> tuple[Day, float]:
        return (self.day, self.period)

    def sort_key(self) -> tuple[int, float]:
        return (self.day.value, self.period)

    def clear(self) -> None:
        self.subject_id = None
        self.staff_id = None

    def to_dict(self) -> dict[str, Any]:
        """Convert slot to dictionary."""
        data: dict[str, Any] = {
            "day": self.day.label,
            "period": int(self.period) if float(self.period).is_integer() else self.period,
            "subject_id": self.subject_id,
            "staff_id": self.staff_id,
        }
        if self.is_break:
            data["is_break"] = True
            data["break_name"] = self.break_name
        if self.locked:
            data["locked"] = True
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a TimeSlot from a dictionary (snake_case or camelCase)."""
        period = data["period"]
        period = int(period) if float(period).is_integer() else float(period)
        return cls(
            day=Day.from_label(data["day"]),
            period=period,
            subject_id=data.get("subject_id", data.get("subjectId")),
            staff_id=data.get("staff_id", data.get("staffId")),
            is_break=bool(data.get("is_break", data.get("isBreak", False))),
            break_name=data.get("break_name", data.get("breakName")),
            locked=bool(data.get("locked", False)),
        )


@dataclass
class TimetableEntry:
    """A display cell of the projected grid."""

    subject: str = ""
    title: str = ""
    staff: str = ""
    continuous: bool | None = None
    span: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.subject

    @property
    def is_continuation(self) -> bool:
        """True for the cells after the first one of a lab block."""
        return bool(self.continuous) and self.span is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "subject": self.subject,
            "title": self.title,
            "staff": self.staff,
        }
        if self.continuous is not None:
            data["continuous"] = self.continuous
        if self.span is not None:
            data["span"] = self.span
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            subject=data.get("subject", ""),
            title=data.get("title", ""),
            staff=data.get("staff", ""),
            continuous=data.get("continuous"),
            span=data.get("span"),
        )


# Projected grid: day label -> one entry per period
TimetableData = dict[str, list[TimetableEntry]]


def timetable_data_to_dict(data: TimetableData) -> dict[str, list[dict[str, Any]]]:
    return {day: [entry.to_dict() for entry in entries] for day, entries in data.items()}


def timetable_data_from_dict(data: dict[str, list[dict[str, Any]]]) -> TimetableData:
    return {
        day: [TimetableEntry.from_dict(entry) for entry in entries]
        for day, entries in data.items()
    }


@dataclass
class TimetableDraft:
    """A generated timetable for one section."""

    id: str
    name: str
    year: str
    dept: str
    section: str
    time_slots: list[TimeSlot] = field(default_factory=list)
    last_updated: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "year": self.year,
            "dept": self.dept,
            "section": self.section,
            "time_slots": [slot.to_dict() for slot in self.time_slots],
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        slots = data.get("time_slots", data.get("timeSlots", []))
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            year=str(data.get("year", "")),
            dept=data.get("dept", ""),
            section=str(data.get("section", "")),
            time_slots=[TimeSlot.from_dict(s) for s in slots],
            last_updated=data.get("last_updated", data.get("lastUpdated", "")),
        )


@dataclass
class ConflictInfo:
    """A pair of slots that double-book a resource."""

    slot_a: TimeSlot
    slot_b: TimeSlot
    type: str = CONFLICT_STAFF
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "time_slot_1": self.slot_a.to_dict(),
            "time_slot_2": self.slot_b.to_dict(),
            "type": self.type,
            "description": self.description,
        }


@dataclass
class SlotMove:
    """A relocation performed while resolving a conflict."""

    subject_id: str | None
    staff_id: str | None
    from_day: Day
    from_period: float
    to_day: Day
    to_period: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "staff_id": self.staff_id,
            "from": {"day": self.from_day.label, "period": self.from_period},
            "to": {"day": self.to_day.label, "period": self.to_period},
        }


@dataclass
class ResolutionResult:
    """Result of conflict resolution.

    ``draft_a_slots`` and ``draft_b_slots`` are copies; the inputs are never
    modified.
    """

    draft_a_slots: list[TimeSlot] = field(default_factory=list)
    draft_b_slots: list[TimeSlot] = field(default_factory=list)
    remaining_conflicts: list[ConflictInfo] = field(default_factory=list)
    moves: list[SlotMove] = field(default_factory=list)

    @property
    def resolved_slots(self) -> list[TimeSlot]:
        """Both drafts' slots, draft A first."""
        return self.draft_a_slots + self.draft_b_slots

    @property
    def total_resolved(self) -> int:
        return len(self.moves)


@dataclass
class UnplacedSubject:
    """A subject that did not receive all of its periods."""

    subject_id: str
    subject_name: str
    required: int
    assigned: int
    reason: UnplacedReason
    details: str = ""

    @property
    def missing(self) -> int:
        return self.required - self.assigned

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_id": self.subject_id,
            "subject_name": self.subject_name,
            "required": self.required,
            "assigned": self.assigned,
            "reason": self.reason.value,
            "details": self.details,
        }


@dataclass
class GenerationStatistics:
    """Summary of a generated grid."""

    days: list[str] = field(default_factory=list)
    periods_per_day: int = 0
    expected_slots: int = 0
    assigned_periods: int = 0
    unassigned_periods: int = 0
    unassigned_slots: list[tuple[str, int]] = field(default_factory=list)
    by_subject: dict[str, dict[str, int]] = field(default_factory=dict)
    staff_overloads: list[str] = field(default_factory=list)

    @property
    def fully_assigned(self) -> bool:
        return self.unassigned_periods == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "days": self.days,
            "periods_per_day": self.periods_per_day,
            "expected_slots": self.expected_slots,
            "assigned_periods": self.assigned_periods,
            "unassigned_periods": self.unassigned_periods,
            "unassigned_slots": [
                {"day": day, "period": period} for day, period in self.unassigned_slots
            ],
            "by_subject": self.by_subject,
            "staff_overloads": self.staff_overloads,
        }


@dataclass
class GenerationResult:
    """Result of a generation run: the sorted grid plus what could not be placed."""

    slots: list[TimeSlot] = field(default_factory=list)
    unplaced: list[UnplacedSubject] = field(default_factory=list)
    statistics: GenerationStatistics = field(default_factory=GenerationStatistics)
    generation_date: str = field(default_factory=lambda: datetime.now().isoformat())
    seed: int | None = None

    @property
    def total_unplaced(self) -> int:
        return len(self.unplaced)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generation_date": self.generation_date,
            "seed": self.seed,
            "slots": [slot.to_dict() for slot in self.slots],
            "unplaced": [u.to_dict() for u in self.unplaced],
            "statistics": self.statistics.to_dict(),
        }
