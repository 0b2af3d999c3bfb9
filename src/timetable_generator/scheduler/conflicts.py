"""Staff conflict tracking, detection and resolution."""

import logging
from collections import Counter, defaultdict
from collections.abc import Iterable
from dataclasses import replace

from ..constants import CONFLICT_STAFF
from ..models import Staff, Subject
from .models import (
    ConflictInfo,
    Day,
    ResolutionResult,
    SlotMove,
    TimeSlot,
    TimetableDraft,
)

logger = logging.getLogger(__name__)


class StaffTracker:
    """Tracks which staff members are booked at each (day, period).

    Bookings are counted, so a staff member booked twice at the same time
    (by two sections) stays booked until both are released.
    """

    def __init__(self) -> None:
        # (day, period) -> staff id -> number of bookings
        self.staff_schedule: dict[tuple[Day, int], Counter[str]] = defaultdict(Counter)

    def seed_from_slots(self, slots: Iterable[TimeSlot]) -> None:
        """Book every assigned, non-break slot."""
        for slot in slots:
            if slot.is_break or slot.staff_id is None:
                continue
            self.reserve(slot.staff_id, slot.day, int(slot.period))

    def is_staff_available(self, staff_id: str | None, day: Day, period: int) -> bool:
        """Check if a staff member is free at (day, period).

        A subject without staff never conflicts.
        """
        if staff_id is None:
            return True
        return self.staff_schedule[(day, period)][staff_id] == 0

    def reserve(self, staff_id: str | None, day: Day, period: int) -> None:
        if staff_id is None:
            return
        self.staff_schedule[(day, period)][staff_id] += 1

    def release(self, staff_id: str | None, day: Day, period: int) -> None:
        if staff_id is None:
            return
        bookings = self.staff_schedule[(day, period)]
        if bookings[staff_id] > 0:
            bookings[staff_id] -= 1

    def get_daily_load(self, staff_id: str, day: Day) -> int:
        """Number of periods a staff member is booked for on a day."""
        return sum(
            counter[staff_id]
            for (booked_day, _), counter in self.staff_schedule.items()
            if booked_day == day
        )


def _slots_of(draft: TimetableDraft | list[TimeSlot]) -> list[TimeSlot]:
    if isinstance(draft, TimetableDraft):
        return draft.time_slots
    return draft


def _staff_name(staff: list[Staff], staff_id: str) -> str | None:
    for member in staff:
        if member.id == staff_id:
            return member.name
    return None


def detect_conflicts(
    draft_a: TimetableDraft | list[TimeSlot],
    draft_b: TimetableDraft | list[TimeSlot],
    staff: list[Staff],
) -> list[ConflictInfo]:
    """Find every staff double-booking across two drafts.

    Non-break slots from both drafts are grouped by (day, period) and then by
    staff id. Each staff member with more than one slot in a group yields
    one conflict built from the first two of those slots.

    Args:
        draft_a: First section's draft (or its slot list)
        draft_b: Second section's draft (or its slot list)
        staff: Staff list, used for descriptions

    Returns:
        Conflicts ordered by day, then period
    """
    slots_by_time: dict[tuple[int, float], list[TimeSlot]] = defaultdict(list)
    for slot in _slots_of(draft_a) + _slots_of(draft_b):
        if not slot.is_break:
            slots_by_time[slot.sort_key()].append(slot)

    conflicts: list[ConflictInfo] = []
    for time_key in sorted(slots_by_time):
        slots_at_time = slots_by_time[time_key]
        if len(slots_at_time) < 2:
            continue

        slots_by_staff: dict[str, list[TimeSlot]] = defaultdict(list)
        for slot in slots_at_time:
            if slot.staff_id:
                slots_by_staff[slot.staff_id].append(slot)

        for staff_id, staff_slots in slots_by_staff.items():
            if len(staff_slots) < 2:
                continue
            first = staff_slots[0]
            name = _staff_name(staff, staff_id) or "A staff member"
            conflicts.append(
                ConflictInfo(
                    slot_a=first,
                    slot_b=staff_slots[1],
                    type=CONFLICT_STAFF,
                    description=(
                        f"{name} is assigned to multiple sections on "
                        f"{first.day.label} at period {int(first.period)}"
                    ),
                )
            )

    if conflicts:
        logger.info(f"Detected {len(conflicts)} staff conflict(s)")
    return conflicts


def resolve_conflicts(
    conflicts: list[ConflictInfo],
    draft_a: TimetableDraft | list[TimeSlot],
    draft_b: TimetableDraft | list[TimeSlot],
    subjects: list[Subject],
    staff: list[Staff],
) -> ResolutionResult:
    """Relocate draft A's side of each staff conflict to a free slot on another day.

    The target is the first free, non-break slot of draft A, in (day, period)
    order, that lies on a different day and where the staff member is not
    booked in either draft. Locked slots are neither moved nor used as
    targets. Without such a slot, or when draft A has no movable slot
    matching the conflict, the conflict is carried forward. Non-staff
    conflicts are always carried forward.

    Args:
        conflicts: Conflicts from detect_conflicts
        draft_a: Draft whose slots are moved
        draft_b: The other draft (copied, never moved)
        subjects: Subject list, used for log messages
        staff: Staff list, used for log messages

    Returns:
        ResolutionResult with copies of both drafts and the remaining conflicts
    """
    slots_a = [replace(slot) for slot in _slots_of(draft_a)]
    slots_b = [replace(slot) for slot in _slots_of(draft_b)]
    ordered_a = sorted(slots_a, key=TimeSlot.sort_key)

    tracker = StaffTracker()
    tracker.seed_from_slots(slots_a)
    tracker.seed_from_slots(slots_b)

    subject_names = {subject.id: subject.short_name for subject in subjects}
    result = ResolutionResult(draft_a_slots=slots_a, draft_b_slots=slots_b)

    for conflict in conflicts:
        if conflict.type != CONFLICT_STAFF:
            result.remaining_conflicts.append(conflict)
            continue

        source = conflict.slot_a
        slot_to_move = next(
            (
                slot
                for slot in slots_a
                if not slot.is_break
                and slot.day == source.day
                and slot.period == source.period
                and slot.staff_id == source.staff_id
            ),
            None,
        )
        if slot_to_move is None:
            logger.debug(f"No slot in the first draft matches: {conflict.description}")
            result.remaining_conflicts.append(conflict)
            continue
        if slot_to_move.locked:
            logger.info(f"Slot is locked, not moved: {conflict.description}")
            result.remaining_conflicts.append(conflict)
            continue

        staff_id = slot_to_move.staff_id
        target = next(
            (
                slot
                for slot in ordered_a
                if slot.is_free
                and slot.day != source.day
                and tracker.is_staff_available(staff_id, slot.day, int(slot.period))
            ),
            None,
        )
        if target is None:
            logger.info(f"Could not resolve: {conflict.description}")
            result.remaining_conflicts.append(conflict)
            continue

        subject_id = slot_to_move.subject_id
        tracker.release(staff_id, slot_to_move.day, int(slot_to_move.period))
        slot_to_move.clear()
        target.subject_id = subject_id
        target.staff_id = staff_id
        tracker.reserve(staff_id, target.day, int(target.period))

        result.moves.append(
            SlotMove(
                subject_id=subject_id,
                staff_id=staff_id,
                from_day=source.day,
                from_period=source.period,
                to_day=target.day,
                to_period=target.period,
            )
        )
        logger.info(
            f"Moved {subject_names.get(subject_id, subject_id)} "
            f"({_staff_name(staff, staff_id) or staff_id}) from "
            f"{source.day.label} period {int(source.period)} to "
            f"{target.day.label} period {int(target.period)}"
        )

    return result
