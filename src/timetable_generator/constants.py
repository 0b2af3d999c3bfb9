"""Constants for timetable generation."""

# Activity subject detection
ACTIVITY_SHORT_NAME = "ACTIVITY"
ACTIVITY_NAME = "Department Activity Hour"

# Number of periods reserved for the activity subject at the end of the week
ACTIVITY_PERIODS = 2

# Randomized placement gives up on a subject after this many failed probes
MAX_FAILED_ATTEMPTS = 50

# Lab start periods are drawn from the first 6 periods, 4 of them per run
LAB_START_PERIOD_RANGE = 6
LAB_START_PERIOD_COUNT = 4

# Break markers sit half a period after the period they follow
BREAK_PERIOD_OFFSET = 0.5

# Default period timings (7 periods)
DEFAULT_PERIOD_TIMINGS = [
    "8:30-9:20",
    "9:20-10:10",
    "10:10-11:00",
    "11:15-12:00",  # After tea break
    "12:00-12:45",
    "1:35-2:25",  # After lunch break
    "2:25-3:15",
]

DEFAULT_BREAKS = [
    {"name": "Tea Break", "after": 3},
    {"name": "Lunch Break", "after": 5},
]

# Conflict types
CONFLICT_STAFF = "staff"
CONFLICT_RESOURCE = "resource"

# Section key separator (year-dept-section)
SECTION_KEY_SEPARATOR = "-"

# Default storage location for drafts and grids
DEFAULT_STORE_DIR = "output/timetables"
