"""Configuration loaders for the generator."""

from .loader import ConfigLoader
from .settings import SettingsConfig
from .staff import StaffConfig
from .subjects import SubjectConfig

__all__ = [
    "ConfigLoader",
    "SettingsConfig",
    "StaffConfig",
    "SubjectConfig",
]
