"""Canvassbook exception hierarchy."""

from __future__ import annotations

from datetime import date


class CanvassbookError(Exception):
    """Base exception for all canvassbook errors."""


class MissingProfileError(CanvassbookError):
    """A report was requested before any user profile was saved."""

    def __init__(self, message: str = "User profile not found") -> None:
        super().__init__(message)


class StorageError(CanvassbookError):
    """Key/value or file store operation failed."""


class BackupNotFoundError(StorageError):
    """No backup exists under the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Backup not found: {key}")


class PersistenceError(CanvassbookError):
    """A repository operation failed because the underlying store failed."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"failed to {operation}")


class InvalidSnapshotError(CanvassbookError):
    """Import payload is malformed or missing required sections."""


class WeekLockedError(CanvassbookError):
    """New daily entries are not accepted once a week passes its cutoff."""

    def __init__(self, week_start: date) -> None:
        self.week_start = week_start
        super().__init__(f"Week starting {week_start.isoformat()} is locked")
