"""Exceptions raised by the tracker core."""


class TrackerError(Exception):
    """Base class for tracker errors."""


class TransactionValidationError(TrackerError, ValueError):
    """A draft was submitted with a missing or malformed field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class StorageReadError(TrackerError):
    """The storage backend could not be read."""


class StorageWriteError(TrackerError):
    """The storage backend rejected a write."""
