"""Weekly class-timetable generation.

This package places subjects on a Monday-Saturday period grid with a greedy,
randomized heuristic. Labs get one contiguous weekday block, the activity
subject takes the last two periods of Saturday, and regular subjects are
spread over the week with a staff non-overlap check and a force-fill
fallback. Drafts of two sections can then be checked and repaired for staff
double-bookings.

Main entry points:
- TimetableGenerator / generate_timetable: build a grid
- convert_to_timetable_data: project a grid into display cells
- detect_conflicts / resolve_conflicts: cross-section staff clashes
- regenerate_timetable: regenerate while keeping locked cells

Usage:
    from timetable_generator.scheduler import TimetableGenerator

    generator = TimetableGenerator(settings, seed=42)
    result = generator.generate(subjects, staff)
"""

from .config import ConfigLoader
from .conflicts import StaffTracker, detect_conflicts, resolve_conflicts
from .generator import TimetableGenerator, compute_statistics, generate_timetable
from .grid import TimetableGrid, build_grid
from .locking import lock_cells, parse_cell, regenerate_timetable
from .models import (
    DAYS,
    LAB_DAYS,
    ConflictInfo,
    Day,
    GenerationResult,
    GenerationStatistics,
    ResolutionResult,
    SlotMove,
    TimeSlot,
    TimetableData,
    TimetableDraft,
    TimetableEntry,
    UnplacedReason,
    UnplacedSubject,
)
from .projection import convert_to_timetable_data

__all__ = [
    # Generation
    "TimetableGenerator",
    "generate_timetable",
    "compute_statistics",
    "regenerate_timetable",
    "lock_cells",
    "parse_cell",
    # Grid
    "TimetableGrid",
    "build_grid",
    # Projection
    "convert_to_timetable_data",
    # Conflicts
    "StaffTracker",
    "detect_conflicts",
    "resolve_conflicts",
    # Configuration
    "ConfigLoader",
    # Models
    "DAYS",
    "LAB_DAYS",
    "ConflictInfo",
    "Day",
    "GenerationResult",
    "GenerationStatistics",
    "ResolutionResult",
    "SlotMove",
    "TimeSlot",
    "TimetableData",
    "TimetableDraft",
    "TimetableEntry",
    "UnplacedReason",
    "UnplacedSubject",
]
