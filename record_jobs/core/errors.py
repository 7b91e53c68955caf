from __future__ import annotations

from collections.abc import Sequence


class RecordJobError(Exception):
    """Base error for every job failure surfaced to the trigger."""


class ValidationError(RecordJobError):
    """Raised before any HTTP call when a required input or lookup is missing."""

    def __init__(self, message: str, *, fields: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.fields = list(fields)


class RemoteError(RecordJobError):
    """Raised when a job service answers with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DispatchTimeoutError(RecordJobError, TimeoutError):
    """Raised when the job service does not answer within the deadline."""

    def __init__(self, message: str, *, timeout_seconds: float) -> None:
        super().__init__(message)
        self.timeout_seconds = timeout_seconds


class TranslationBatchError(RecordJobError):
    """Raised after a continue-on-error translation batch had failures."""

    def __init__(self, failures: dict[str, RecordJobError]) -> None:
        names = ", ".join(failures)
        super().__init__(f"Translation failed for: {names}")
        self.failures = failures


class RecordStoreError(RecordJobError):
    """Raised when the record store cannot be read or updated."""


class RecordNotFoundError(RecordStoreError):
    """Raised when the requested record or table does not exist."""
