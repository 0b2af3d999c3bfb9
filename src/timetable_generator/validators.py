"""Input validation for timetable generation.

Generation never fails on infeasibility, only on malformed input, and that
check runs before any placement starts.
"""

from .exceptions import InvalidSettingsError, InvalidSubjectError
from .models import Staff, Subject, TimetableSettings


def validate_subject(subject: Subject) -> tuple[bool, str | None]:
    """Validate a single subject.

    Args:
        subject: Subject to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not subject.id:
        return False, "Subject id is empty"

    if not isinstance(subject.periods_per_week, int) or isinstance(
        subject.periods_per_week, bool
    ):
        return False, f"periods_per_week must be an integer, got {subject.periods_per_week!r}"

    if subject.periods_per_week < 1:
        return False, f"periods_per_week must be at least 1, got {subject.periods_per_week}"

    return True, None


def validate_settings(settings: TimetableSettings) -> tuple[bool, str | None]:
    """Validate timetable settings.

    Args:
        settings: Settings to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if settings.periods_per_day < 1:
        return False, "At least one period timing is required"

    for break_info in settings.breaks:
        if not break_info.name:
            return False, "Break name is empty"
        if not 0 <= break_info.after <= settings.periods_per_day:
            return False, (
                f"Break '{break_info.name}' follows period {break_info.after}, "
                f"outside 0..{settings.periods_per_day}"
            )

    return True, None


def validate_staff_references(
    subjects: list[Subject], staff: list[Staff]
) -> list[str]:
    """Find subjects whose staff id is not in the staff list.

    Unknown staff still get scheduled (the projection shows an empty name),
    so these are warnings rather than errors.

    Returns:
        List of warning messages
    """
    known = {member.id for member in staff}
    return [
        f"Subject '{subject.id}' references unknown staff '{subject.staff_id}'"
        for subject in subjects
        if subject.staff_id is not None and subject.staff_id not in known
    ]


def validate_generation_input(
    subjects: list[Subject], settings: TimetableSettings
) -> None:
    """Fail fast on malformed input.

    Raises:
        InvalidSubjectError: Bad or duplicate subject
        InvalidSettingsError: Bad settings
    """
    is_valid, error = validate_settings(settings)
    if not is_valid:
        raise InvalidSettingsError(error)

    seen: set[str] = set()
    for subject in subjects:
        is_valid, error = validate_subject(subject)
        if not is_valid:
            raise InvalidSubjectError(subject.id, error)
        if subject.id in seen:
            raise InvalidSubjectError(subject.id, "duplicate subject id")
        seen.add(subject.id)
