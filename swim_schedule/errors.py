"""Exceptions raised at the parse and configuration boundaries."""


class ScheduleError(Exception):
    """Base class for all swim schedule errors."""


class SpreadsheetFormatError(ScheduleError):
    """The heat spreadsheet could not be read or has no recognizable header row."""


class ConfigurationError(ScheduleError):
    """Schedule configuration values are invalid."""
