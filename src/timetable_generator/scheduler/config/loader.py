"""Unified configuration loader."""

from pathlib import Path

from ...exceptions import ConfigError
from .settings import SettingsConfig
from .staff import StaffConfig
from .subjects import SubjectConfig


class ConfigLoader:
    """Unified loader for a section's generation inputs."""

    def __init__(self, config_dir: Path | None = None):
        """
        Initialize configuration loader.

        Args:
            config_dir: Path to directory containing configuration files.
                       Expected files:
                       - settings.json (optional, defaults apply)
                       - subjects.json or subjects.csv
                       - staff.json or staff.csv
        """
        if config_dir is None:
            config_dir = Path("config")

        self.config_dir = Path(config_dir)
        if not self.config_dir.is_dir():
            raise ConfigError("configuration directory not found", str(self.config_dir))

        self.settings = SettingsConfig(self._get_path("settings.json"))
        self.subjects = SubjectConfig(
            self._get_path("subjects.json") or self._get_path("subjects.csv")
        )
        self.staff = StaffConfig(self._get_path("staff.json") or self._get_path("staff.csv"))

        if not self.subjects.subjects:
            raise ConfigError("no subjects found (subjects.json or subjects.csv)", str(self.config_dir))

    def _get_path(self, filename: str) -> Path | None:
        """Get path to config file if it exists."""
        path = self.config_dir / filename
        return path if path.exists() else None
