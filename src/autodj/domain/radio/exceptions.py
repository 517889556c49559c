"""AutoDJ-specific exceptions for error handling."""


class AutoDJError(Exception):
    """Base exception for AutoDJ operations."""

    pass


class InvalidStationError(AutoDJError):
    """Raised when a station's scheduling settings are unusable."""

    pass
