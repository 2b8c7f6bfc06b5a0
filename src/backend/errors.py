"""Exception types for the recoverable failure modes of the vault."""
from __future__ import annotations


class GrooveVaultError(Exception):
    """Base class for all vault errors."""


class StorageCorruptError(GrooveVaultError):
    """Stored collection blob could not be parsed. Always recovered by reseeding."""


class StorageWriteError(GrooveVaultError):
    """Key/value storage refused a write (disk full, permission denied, ...)."""


class ImportInvalidError(GrooveVaultError):
    """Imported backup is not valid JSON or its top-level value is not a list."""


class RecommendationServiceError(GrooveVaultError):
    """Recommendation call failed or returned an unusable payload."""

    USER_MESSAGE = "Connection refused. Verify API link."

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.USER_MESSAGE)
        self.detail = detail
