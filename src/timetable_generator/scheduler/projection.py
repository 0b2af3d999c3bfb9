"""Projection of the slot list into per-day display cells."""

from ..models import Staff, Subject
from .models import DAYS, TimeSlot, TimetableData, TimetableEntry


def _max_period(slots: list[TimeSlot]) -> int:
    periods = [
        int(slot.period)
        for slot in slots
        if not slot.is_break and float(slot.period).is_integer()
    ]
    return max(periods, default=0)


def convert_to_timetable_data(
    slots: list[TimeSlot],
    subjects: list[Subject],
    staff: list[Staff],
) -> TimetableData:
    """Convert a slot list into the day-keyed grid used for display and storage.

    Every day gets one cell per period up to the highest period present. The
    first cell of a lab block carries ``continuous=True`` and a ``span`` equal
    to the periods the block holds (``periods_per_week`` for a complete
    block); the following cells of the block carry ``continuous=True`` and
    the same text, with no span, so a renderer can merge them.

    Args:
        slots: Generated slots
        subjects: Subject list for names and lab flags
        staff: Staff list for display names

    Returns:
        Mapping of day label to list of TimetableEntry
    """
    subjects_by_id = {subject.id: subject for subject in subjects}
    staff_by_id = {member.id: member for member in staff}
    max_period = _max_period(slots)

    result: TimetableData = {
        day.label: [TimetableEntry() for _ in range(max_period)] for day in DAYS
    }
    assigned = sorted(
        (
            slot
            for slot in slots
            if not slot.is_break
            and slot.subject_id is not None
            and float(slot.period).is_integer()
        ),
        key=TimeSlot.sort_key,
    )
    occupied = {(slot.day, int(slot.period)): slot.subject_id for slot in assigned}

    for slot in assigned:
        subject = subjects_by_id.get(slot.subject_id)
        if subject is None:
            continue

        cells = result[slot.day.label]
        index = int(slot.period) - 1
        member = staff_by_id.get(slot.staff_id) if slot.staff_id else None
        staff_name = member.name if member else ""

        if not subject.is_lab:
            cells[index] = TimetableEntry(
                subject=subject.short_name,
                title=subject.name,
                staff=staff_name,
                continuous=False,
            )
            continue

        # Later periods of a lab block are written by the block's first period
        if occupied.get((slot.day, int(slot.period) - 1)) == subject.id:
            continue

        held = 1
        while (
            held < subject.periods_per_week
            and occupied.get((slot.day, int(slot.period) + held)) == subject.id
        ):
            held += 1

        cells[index] = TimetableEntry(
            subject=subject.short_name,
            title=subject.name,
            staff=staff_name,
            continuous=True,
            span=held,
        )
        for offset in range(1, held):
            cells[index + offset] = TimetableEntry(
                subject=subject.short_name,
                title=subject.name,
                staff=staff_name,
                continuous=True,
            )

    return result
