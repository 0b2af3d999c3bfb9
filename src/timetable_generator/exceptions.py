"""Custom exceptions for the timetable generator."""


class TimetableError(Exception):
    """Base exception for timetable errors."""

    pass


class ValidationError(TimetableError):
    """Input failed validation before generation started."""

    pass


class InvalidSubjectError(ValidationError):
    """Subject definition is malformed."""

    def __init__(self, subject_id: str | None, reason: str):
        self.subject_id = subject_id
        self.reason = reason
        label = f"'{subject_id}'" if subject_id else "<missing id>"
        super().__init__(f"Invalid subject {label}: {reason}")


class InvalidSettingsError(ValidationError):
    """Timetable settings are malformed."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid timetable settings: {reason}")


class ConfigError(TimetableError):
    """Configuration file is missing or unreadable."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        location = f" ({path})" if path else ""
        super().__init__(f"Configuration error{location}: {message}")


class DraftNotFoundError(TimetableError):
    """No stored draft for the requested section."""

    def __init__(self, section_key: str, kind: str = "draft"):
        self.section_key = section_key
        self.kind = kind
        super().__init__(f"No {kind} stored for section '{section_key}'")
