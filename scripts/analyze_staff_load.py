#!/usr/bin/env python3
"""Analyze per-staff daily load across every stored section."""

from __future__ import annotations

import argparse
from collections import defaultdict
from pathlib import Path

from timetable_generator.constants import DEFAULT_STORE_DIR
from timetable_generator.scheduler import DAYS, ConfigLoader, detect_conflicts
from timetable_generator.storage import SectionStore, create_section_key


def _collect_daily_load(drafts) -> dict[str, dict[str, set[tuple[str, int]]]]:
    """staff id -> day label -> {(section key, period)}."""
    staff_day_slots: dict[str, dict[str, set[tuple[str, int]]]] = defaultdict(
        lambda: defaultdict(set)
    )
    for draft in drafts:
        key = create_section_key(draft.year, draft.dept, draft.section)
        for slot in draft.time_slots:
            if slot.is_break or slot.staff_id is None:
                continue
            staff_day_slots[slot.staff_id][slot.day.label].add((key, int(slot.period)))
    return staff_day_slots


def _format_day_counts(day_slots: dict[str, set[tuple[str, int]]]) -> str:
    parts = []
    for day in DAYS:
        parts.append(f"{day.label[:3]}={len(day_slots.get(day.label, set()))}")
    return " ".join(parts)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Analyze staff daily load across stored section timetables."
    )
    parser.add_argument(
        "--store",
        type=Path,
        default=Path(DEFAULT_STORE_DIR),
        help=f"Section store directory (default: {DEFAULT_STORE_DIR})",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Configuration directory, for staff names and daily limits",
    )
    args = parser.parse_args()

    drafts = SectionStore(args.store).load_all_drafts()
    print(f"Sections in store: {len(drafts)}")
    if not drafts:
        return

    staff = ConfigLoader(args.config).staff.staff if args.config else []
    names = {member.id: member.name for member in staff}
    limits = {member.id: member.max_periods_per_day for member in staff}

    staff_day_slots = _collect_daily_load(drafts)
    overloaded: dict[str, list[str]] = {}

    for staff_id in sorted(staff_day_slots.keys()):
        day_slots = staff_day_slots[staff_id]
        total = sum(len(slots) for slots in day_slots.values())
        label = names.get(staff_id, staff_id)
        print(f"{label}: {_format_day_counts(day_slots)} | total={total}")

        limit = limits.get(staff_id)
        if limit is None:
            continue
        days_over = [day for day, slots in day_slots.items() if len(slots) > limit]
        if days_over:
            overloaded[label] = days_over

    clashes = 0
    for index, draft_a in enumerate(drafts):
        for draft_b in drafts[index + 1 :]:
            clashes += len(detect_conflicts(draft_a, draft_b, staff))
    print(f"\nPairwise staff conflicts: {clashes}")

    if overloaded:
        print("\nOver daily limit:")
        for label in sorted(overloaded.keys()):
            print(f"- {label}: {', '.join(overloaded[label])}")


if __name__ == "__main__":
    main()
