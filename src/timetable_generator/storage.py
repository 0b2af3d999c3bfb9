"""JSON-file store for section drafts and projected grids.

Each section lives in one file named after its key (``year-dept-section``)::

    {
      "draft": {...},     # TimetableDraft
      "grid": {...},      # projected grid (day -> cells)
      "master": {...}     # grid promoted to the confirmed timetable
    }
"""

import json
from pathlib import Path
from typing import Any

from .constants import DEFAULT_STORE_DIR, SECTION_KEY_SEPARATOR
from .exceptions import DraftNotFoundError
from .scheduler.models import (
    TimetableData,
    TimetableDraft,
    timetable_data_from_dict,
    timetable_data_to_dict,
)


def create_section_key(year: str, dept: str, section: str) -> str:
    """Build the store key for a section, e.g. '3-AIDS-A'."""
    return SECTION_KEY_SEPARATOR.join([str(year), dept, str(section)])


def create_draft_id(year: str, dept: str, section: str) -> str:
    return f"{year}_{dept}_{section}_draft"


class SectionStore:
    """Key-value store of section timetables backed by a directory of JSON files."""

    def __init__(self, root: Path | str = DEFAULT_STORE_DIR):
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def _read(self, key: str) -> dict[str, Any]:
        path = self._path(key)
        if not path.exists():
            return {}
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    def _write(self, key: str, record: dict[str, Any]) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self._path(key), "w", encoding="utf-8") as f:
            json.dump(record, f, ensure_ascii=False, indent=2)

    def save_draft(self, draft: TimetableDraft, grid: TimetableData | None = None) -> str:
        """Store a draft (and optionally its projected grid).

        Returns:
            The section key
        """
        key = create_section_key(draft.year, draft.dept, draft.section)
        record = self._read(key)
        record["draft"] = draft.to_dict()
        if grid is not None:
            record["grid"] = timetable_data_to_dict(grid)
        self._write(key, record)
        return key

    def load_draft(self, year: str, dept: str, section: str) -> TimetableDraft:
        """Load a section's draft.

        Raises:
            DraftNotFoundError: If nothing is stored for the section
        """
        key = create_section_key(year, dept, section)
        record = self._read(key)
        if "draft" not in record:
            raise DraftNotFoundError(key)
        return TimetableDraft.from_dict(record["draft"])

    def load_grid(self, year: str, dept: str, section: str) -> TimetableData:
        key = create_section_key(year, dept, section)
        record = self._read(key)
        if "grid" not in record:
            raise DraftNotFoundError(key, kind="grid")
        return timetable_data_from_dict(record["grid"])

    def promote_to_master(self, year: str, dept: str, section: str) -> TimetableData:
        """Copy the draft grid to the confirmed (master) timetable."""
        key = create_section_key(year, dept, section)
        record = self._read(key)
        if "grid" not in record:
            raise DraftNotFoundError(key, kind="grid")
        record["master"] = record["grid"]
        self._write(key, record)
        return timetable_data_from_dict(record["master"])

    def load_master(self, year: str, dept: str, section: str) -> TimetableData:
        key = create_section_key(year, dept, section)
        record = self._read(key)
        if "master" not in record:
            raise DraftNotFoundError(key, kind="master timetable")
        return timetable_data_from_dict(record["master"])

    def list_sections(self) -> list[str]:
        """Keys of all stored sections, sorted."""
        if not self.root.exists():
            return []
        return sorted(path.stem for path in self.root.glob("*.json"))

    def load_all_drafts(self) -> list[TimetableDraft]:
        drafts = []
        for key in self.list_sections():
            record = self._read(key)
            if "draft" in record:
                drafts.append(TimetableDraft.from_dict(record["draft"]))
        return drafts
