"""Weekly grid construction and slot lookup."""

from collections.abc import Iterable, Iterator

from ..constants import BREAK_PERIOD_OFFSET
from ..models import Subject, TimetableSettings
from .models import DAYS, Day, TimeSlot


class TimetableGrid:
    """Mutable arena of time slots for one generation run.

    Real periods are indexed by (day, period) so placement phases never scan
    the full slot list for a lookup. Break markers are kept in the slot list
    but never indexed.
    """

    def __init__(self, slots: Iterable[TimeSlot], periods_per_day: int) -> None:
        self.slots: list[TimeSlot] = list(slots)
        self.periods_per_day = periods_per_day
        self._index: dict[tuple[Day, int], TimeSlot] = {}
        for slot in self.slots:
            if not slot.is_break:
                self._index[(slot.day, int(slot.period))] = slot

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def get(self, day: Day, period: int) -> TimeSlot | None:
        """Get the non-break slot at (day, period), if any."""
        return self._index.get((day, period))

    def is_free(self, day: Day, period: int) -> bool:
        slot = self.get(day, period)
        return slot is not None and slot.is_free

    def is_range_free(self, day: Day, start: int, length: int) -> bool:
        """Check that periods start..start+length-1 on day are all free."""
        return all(self.is_free(day, start + offset) for offset in range(length))

    def assign(self, slot: TimeSlot, subject: Subject) -> None:
        """Assign a subject and its staff member to a slot."""
        slot.subject_id = subject.id
        slot.staff_id = subject.staff_id

    def free_slots(self) -> list[TimeSlot]:
        """Free non-break slots ordered by day, then period."""
        return sorted((s for s in self._index.values() if s.is_free), key=TimeSlot.sort_key)

    def real_slots(self) -> list[TimeSlot]:
        """All non-break slots ordered by day, then period."""
        return sorted(self._index.values(), key=TimeSlot.sort_key)

    def slots_for_subject(self, subject_id: str) -> list[TimeSlot]:
        return [s for s in self.real_slots() if s.subject_id == subject_id]

    def count_assigned(self, subject_id: str) -> int:
        return sum(1 for s in self._index.values() if s.subject_id == subject_id)

    def sorted_slots(self) -> list[TimeSlot]:
        """All slots, break markers included, ordered by day then period."""
        return sorted(self.slots, key=TimeSlot.sort_key)


def build_grid(settings: TimetableSettings) -> TimetableGrid:
    """Build the empty weekly grid for the given settings.

    One slot per (day, period) for every day and period, then one break
    marker per configured break per day.

    Args:
        settings: Timetable settings (period timings and breaks)

    Returns:
        TimetableGrid with every slot unassigned
    """
    periods_per_day = settings.periods_per_day
    slots: list[TimeSlot] = []

    for day in DAYS:
        for period in range(1, periods_per_day + 1):
            slots.append(TimeSlot(day=day, period=period))

    for day in DAYS:
        for break_info in settings.breaks:
            slots.append(
                TimeSlot(
                    day=day,
                    period=break_info.after + BREAK_PERIOD_OFFSET,
                    is_break=True,
                    break_name=break_info.name,
                )
            )

    return TimetableGrid(slots, periods_per_day)
