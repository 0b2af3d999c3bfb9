"""Staff list loader."""

import csv
import json
from pathlib import Path

from ...exceptions import ConfigError
from ...models import Staff


class StaffConfig:
    """Loader for staff.json or staff.csv.

    CSV columns: id, name, email, max_periods_per_day.
    """

    def __init__(self, staff_path: Path | None = None):
        self.staff: list[Staff] = []
        self._by_id: dict[str, Staff] = {}

        if staff_path and staff_path.exists():
            if staff_path.suffix == ".csv":
                self._load_csv(staff_path)
            else:
                self._load_json(staff_path)

    def _load_json(self, path: Path) -> None:
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON: {e}", str(path)) from e

        records = data.get("staff", []) if isinstance(data, dict) else data
        for record in records:
            try:
                self._add(Staff.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigError(f"malformed staff {record!r}: {e}", str(path)) from e

    def _load_csv(self, path: Path) -> None:
        with open(path, encoding="utf-8") as f:
            reader = csv.DictReader(f)
            for line, row in enumerate(reader, start=2):
                max_periods = (row.get("max_periods_per_day") or "").strip()
                try:
                    member = Staff(
                        id=row["id"].strip(),
                        name=row["name"].strip(),
                        email=(row.get("email") or "").strip() or None,
                        max_periods_per_day=int(max_periods) if max_periods else None,
                    )
                except (KeyError, AttributeError, ValueError) as e:
                    raise ConfigError(f"malformed row {line}: {e}", str(path)) from e
                self._add(member)

    def _add(self, member: Staff) -> None:
        self.staff.append(member)
        self._by_id[member.id] = member

    def get_staff(self, staff_id: str) -> Staff | None:
        return self._by_id.get(staff_id)

    def get_name(self, staff_id: str | None) -> str:
        """Display name for a staff id, empty when unknown."""
        member = self._by_id.get(staff_id) if staff_id else None
        return member.name if member else ""
