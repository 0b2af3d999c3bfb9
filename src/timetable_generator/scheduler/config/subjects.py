"""Subject list loader."""

import csv
import json
from pathlib import Path

from ...exceptions import ConfigError
from ...models import Subject

TRUE_VALUES = {"true", "yes", "1", "y"}


class SubjectConfig:
    """Loader for subjects.json or subjects.csv.

    CSV columns: id, name, short_name, periods_per_week, staff_id, is_lab,
    priority, code. Missing optional columns take their defaults.
    """

    def __init__(self, subjects_path: Path | None = None):
        self.subjects: list[Subject] = []
        self._by_id: dict[str, Subject] = {}

        if subjects_path and subjects_path.exists():
            if subjects_path.suffix == ".csv":
                self._load_csv(subjects_path)
            else:
                self._load_json(subjects_path)

    def _load_json(self, path: Path) -> None:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON: {e}", str(path)) from e

        records = data.get("subjects", []) if isinstance(data, dict) else data
        for record in records:
            try:
                self._add(Subject.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"malformed subject {record!r}: {e}", str(path)) from e

    def _load_csv(self, path: Path) -> None:
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                try:
                    subject = Subject(
                        id=row["id"].strip(),
                        name=row["name"].strip(),
                        short_name=(row.get("short_name") or row["name"]).strip(),
                        periods_per_week=int(row["periods_per_week"]),
                        staff_id=(row.get("staff_id") or "").strip() or None,
                        is_lab=(row.get("is_lab") or "").strip().lower() in TRUE_VALUES,
                        priority=int(row.get("priority") or 0),
                        code=(row.get("code") or "").strip() or None,
                    )
                except (KeyError, AttributeError, ValueError) as e:
                    raise ConfigError(f"malformed row {line}: {e}", str(path)) from e
                self._add(subject)

    def _add(self, subject: Subject) -> None:
        self.subjects.append(subject)
        self._by_id[subject.id] = subject

    def get_subject(self, subject_id: str) -> Subject | None:
        return self._by_id.get(subject_id)

    def get_labs(self) -> list[Subject]:
        return [s for s in self.subjects if s.is_lab]

    def total_periods(self) -> int:
        """Total weekly periods requested by all subjects."""
        return sum(s.periods_per_week for s in self.subjects)
