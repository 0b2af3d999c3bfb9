"""Input data models for the timetable generator.

Subjects, staff and settings arrive as plain data from whatever store the
caller uses. Keys are accepted in snake_case or in the camelCase form used by
stored drafts (``periodsPerWeek``, ``staffId`` and so on).
"""

from dataclasses import dataclass, field
from typing import Any, Self

from .constants import (
    ACTIVITY_NAME,
    ACTIVITY_SHORT_NAME,
    DEFAULT_BREAKS,
    DEFAULT_PERIOD_TIMINGS,
)


def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key from data."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class Subject:
    """A subject taught to a section.

    Attributes:
        id: Unique identifier
        name: Display name (full title)
        short_name: Short code shown in grid cells
        periods_per_week: Weekly periods; for labs, the length of the single block
        staff_id: Assigned staff member, if any
        is_lab: True for lab subjects (placed as one contiguous block)
        priority: Scheduling priority, lower sorts first
        continuous: Marker for multi-period rendering
        code: Course code
    """

    id: str
    name: str
    short_name: str
    periods_per_week: int
    staff_id: str | None = None
    is_lab: bool = False
    priority: int = 0
    continuous: bool = False
    code: str | None = None

    @property
    def is_activity(self) -> bool:
        """True for the department activity subject."""
        return self.short_name == ACTIVITY_SHORT_NAME or self.name == ACTIVITY_NAME

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a Subject from a dictionary."""
        name = _pick(data, "name", "title", default="")
        return cls(
            id=str(data["id"]),
            name=name,
            short_name=_pick(data, "short_name", "shortName", default=name),
            periods_per_week=int(_pick(data, "periods_per_week", "periodsPerWeek", default=0)),
            staff_id=_optional_str(_pick(data, "staff_id", "staffId")),
            is_lab=bool(_pick(data, "is_lab", "isLab", default=False)),
            priority=int(_pick(data, "priority", default=0)),
            continuous=bool(_pick(data, "continuous", default=False)),
            code=_pick(data, "code"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert subject to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "short_name": self.short_name,
            "periods_per_week": self.periods_per_week,
            "staff_id": self.staff_id,
            "is_lab": self.is_lab,
            "priority": self.priority,
            "continuous": self.continuous,
            "code": self.code,
        }


@dataclass
class Staff:
    """A staff member.

    ``max_periods_per_day`` is advisory: the generator reports overloads but
    never refuses a placement because of it.
    """

    id: str
    name: str
    email: str | None = None
    max_periods_per_day: int | None = None
    subjects: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create a Staff member from a dictionary."""
        max_periods = _pick(data, "max_periods_per_day", "maxPeriods")
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email") or None,
            max_periods_per_day=int(max_periods) if max_periods not in (None, "") else None,
            subjects=list(data.get("subjects") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert staff member to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "max_periods_per_day": self.max_periods_per_day,
            "subjects": self.subjects,
        }


@dataclass
class BreakInfo:
    """A break shown between two periods."""

    name: str
    after: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(name=data["name"], after=int(data["after"]))

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "after": self.after}


@dataclass
class HardConstraints:
    """Hard constraint toggles."""

    no_teacher_overlap: bool = True
    exact_subject_counts: bool = True
    preserve_locked_slots: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            no_teacher_overlap=bool(
                _pick(data, "no_teacher_overlap", "noTeacherOverlap", default=True)
            ),
            exact_subject_counts=bool(
                _pick(data, "exact_subject_counts", "exactSubjectCounts", default=True)
            ),
            preserve_locked_slots=bool(
                _pick(data, "preserve_locked_slots", "preserveLockedSlots", default=True)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "no_teacher_overlap": self.no_teacher_overlap,
            "exact_subject_counts": self.exact_subject_counts,
            "preserve_locked_slots": self.preserve_locked_slots,
        }


@dataclass
class SoftConstraints:
    """Soft constraint toggles.

    Only ``priority_scheduling`` changes placement; the rest are carried for
    the settings screen and stored drafts.
    """

    load_balancing: bool = True
    priority_scheduling: bool = True
    lab_clustering: bool = True
    teacher_preferences: bool = False
    require_backup_teacher: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            load_balancing=bool(_pick(data, "load_balancing", "loadBalancing", default=True)),
            priority_scheduling=bool(
                _pick(data, "priority_scheduling", "priorityScheduling", default=True)
            ),
            lab_clustering=bool(_pick(data, "lab_clustering", "labClustering", default=True)),
            teacher_preferences=bool(
                _pick(data, "teacher_preferences", "teacherPreferences", default=False)
            ),
            require_backup_teacher=bool(
                _pick(data, "require_backup_teacher", "requireBackupTeacher", default=False)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "load_balancing": self.load_balancing,
            "priority_scheduling": self.priority_scheduling,
            "lab_clustering": self.lab_clustering,
            "teacher_preferences": self.teacher_preferences,
            "require_backup_teacher": self.require_backup_teacher,
        }

    def inert_flags(self) -> list[str]:
        """Names of enabled toggles that do not affect placement."""
        flags = {
            "load_balancing": self.load_balancing,
            "lab_clustering": self.lab_clustering,
            "teacher_preferences": self.teacher_preferences,
            "require_backup_teacher": self.require_backup_teacher,
        }
        return [name for name, enabled in flags.items() if enabled]


@dataclass
class TimetableSettings:
    """Grid shape and constraint toggles for one generation run."""

    period_timings: list[str] = field(default_factory=lambda: list(DEFAULT_PERIOD_TIMINGS))
    breaks: list[BreakInfo] = field(
        default_factory=lambda: [BreakInfo.from_dict(b) for b in DEFAULT_BREAKS]
    )
    hard_constraints: HardConstraints = field(default_factory=HardConstraints)
    soft_constraints: SoftConstraints = field(default_factory=SoftConstraints)

    @property
    def periods_per_day(self) -> int:
        """Number of real periods per day."""
        return len(self.period_timings)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create settings from a dictionary.

        A bare ``periodsPerDay`` without timings takes the first N default
        timings, the way the generator screen builds its settings.
        """
        timings = _pick(data, "period_timings", "periodTimings")
        if timings is None:
            count = _pick(data, "periods_per_day", "periodsPerDay")
            timings = (
                DEFAULT_PERIOD_TIMINGS[: int(count)]
                if count is not None
                else DEFAULT_PERIOD_TIMINGS
            )
        breaks = _pick(data, "breaks", default=DEFAULT_BREAKS)
        return cls(
            period_timings=list(timings),
            breaks=[BreakInfo.from_dict(b) for b in breaks],
            hard_constraints=HardConstraints.from_dict(
                _pick(data, "hard_constraints", "hardConstraints", default={})
            ),
            soft_constraints=SoftConstraints.from_dict(
                _pick(data, "soft_constraints", "softConstraints", default={})
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            "periods_per_day": self.periods_per_day,
            "period_timings": self.period_timings,
            "breaks": [b.to_dict() for b in self.breaks],
            "hard_constraints": self.hard_constraints.to_dict(),
            "soft_constraints": self.soft_constraints.to_dict(),
        }


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)
