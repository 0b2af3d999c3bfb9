"""Timetable settings loader."""

import json
from pathlib import Path

from ...exceptions import ConfigError
from ...models import TimetableSettings


class SettingsConfig:
    """Loader for settings.json; falls back to the default settings."""

    def __init__(self, settings_path: Path | None = None):
        self.settings = TimetableSettings()

        if settings_path and settings_path.exists():
            self._load(settings_path)

    def _load(self, path: Path) -> None:
        """Load settings from JSON."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON: {e}", str(path)) from e

        try:
            self.settings = TimetableSettings.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"malformed settings: {e}", str(path)) from e
