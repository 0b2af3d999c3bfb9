"""Utility functions for timetable generation."""

import random

from ..models import Subject


def random_permutation(length: int, rng: random.Random) -> list[int]:
    """Uniform permutation of 0..length-1 (Fisher-Yates)."""
    numbers = list(range(length))
    for i in range(len(numbers) - 1, 0, -1):
        j = rng.randint(0, i)
        numbers[i], numbers[j] = numbers[j], numbers[i]
    return numbers


def find_activity_subject(subjects: list[Subject]) -> Subject | None:
    """Find the department activity subject, if present."""
    for subject in subjects:
        if subject.is_activity:
            return subject
    return None


def split_subjects(
    subjects: list[Subject],
) -> tuple[list[Subject], Subject | None, list[Subject]]:
    """Split subjects into labs, the activity subject and regular subjects.

    The activity subject is never a lab or a regular subject, whatever its
    ``is_lab`` flag says.

    Returns:
        Tuple of (labs, activity, regular) with input order preserved
    """
    activity = find_activity_subject(subjects)
    remaining = [s for s in subjects if activity is None or s.id != activity.id]
    labs = [s for s in remaining if s.is_lab]
    regular = [s for s in remaining if not s.is_lab]
    return labs, activity, regular


def sort_subjects_by_priority(subjects: list[Subject]) -> list[Subject]:
    """Sort subjects: labs first, then ascending priority.

    The sort is stable, so subjects with equal priority keep input order.
    """
    return sorted(subjects, key=lambda s: (not s.is_lab, s.priority))


def make_rng(seed: int | None = None, rng: random.Random | None = None) -> random.Random:
    """Return the given generator, or a new one seeded with seed."""
    if rng is not None:
        return rng
    return random.Random(seed)
