"""Timetable Generator - weekly class timetables for college sections.

This module generates conflict-free weekly timetables from a list of subjects
(theory, lab, activity) with weekly period counts and staff assignments, and
checks pairs of section timetables for staff double-bookings.

Example usage:
    from timetable_generator import Subject, Staff, TimetableSettings
    from timetable_generator.scheduler import (
        TimetableGenerator,
        convert_to_timetable_data,
    )

    settings = TimetableSettings()
    result = TimetableGenerator(settings, seed=7).generate(subjects, staff)

    print(f"Unassigned periods: {result.statistics.unassigned_periods}")
    for unplaced in result.unplaced:
        print(f"{unplaced.subject_name}: {unplaced.reason.value}")

    grid = convert_to_timetable_data(result.slots, subjects, staff)

    # Export to Excel
    from timetable_generator.exporters import ExcelExporter
    ExcelExporter().export(draft, grid, "timetable.xlsx")
"""

from .exceptions import (
    ConfigError,
    DraftNotFoundError,
    InvalidSettingsError,
    InvalidSubjectError,
    TimetableError,
    ValidationError,
)
from .exporters import CSVExporter, ExcelExporter, JSONExporter, get_exporter
from .models import (
    BreakInfo,
    HardConstraints,
    SoftConstraints,
    Staff,
    Subject,
    TimetableSettings,
)
from .storage import SectionStore, create_section_key

__version__ = "0.1.0"

__all__ = [
    # Models
    "Subject",
    "Staff",
    "BreakInfo",
    "HardConstraints",
    "SoftConstraints",
    "TimetableSettings",
    # Storage
    "SectionStore",
    "create_section_key",
    # Exporters
    "JSONExporter",
    "CSVExporter",
    "ExcelExporter",
    "get_exporter",
    # Exceptions
    "TimetableError",
    "ValidationError",
    "InvalidSubjectError",
    "InvalidSettingsError",
    "ConfigError",
    "DraftNotFoundError",
]
