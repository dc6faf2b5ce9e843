"""Exception hierarchy for supload."""

from typing import Dict, Optional


class SuploadError(Exception):
    """Base exception for all supload errors."""

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SuploadError):
    """Raised when a required argument or setting is missing."""
    pass


class AuthenticationError(SuploadError):
    """Raised when the auth endpoint does not hand out a storage URL and token."""
    pass


class PreconditionError(SuploadError):
    """Raised when the destination container does not exist."""
    pass


class TaskError(SuploadError):
    """Base class for errors that only affect a single upload task."""
    pass


class SourceNotAFileError(TaskError):
    """Raised when the source path is missing or is not a regular file."""
    pass


class DigestComputeError(TaskError):
    """Raised when the local MD5 digest cannot be computed."""
    pass


class SourceReadError(TaskError):
    """Raised when the source file cannot be opened for upload."""
    pass



class TransportUnreachable(TaskError):
    """Raised when the storage endpoint cannot be reached."""
    pass


class TransferNoConfirmation(TaskError):
    """Raised when an upload response carries no ETag."""
    pass


class IntegrityMismatch(TaskError):
    """Raised when the ETag reported after upload differs from the local digest."""

    def __init__(self, reported: str, expected: str) -> None:
        super().__init__(
            f"etag({reported}) != md5hex({expected})",
            details={"reported": reported, "expected": expected},
        )
        self.reported = reported
        self.expected = expected
