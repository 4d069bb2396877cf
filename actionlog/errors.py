"""Exceptions raised by the persistence layer."""


class ActionLogError(Exception):
    """Base exception for action log persistence."""

    pass


class StorageError(ActionLogError):
    """Raised when the key-value store rejects a read or write."""

    pass


class CorruptDataError(ActionLogError):
    """Raised when a stored value exists but cannot be parsed into a snapshot."""

    pass
