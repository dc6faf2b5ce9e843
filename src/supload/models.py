"""Data records shared by the transport, walker and sync engine."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional


def normalize_prefix(value: str) -> str:
    """Return ``value`` with exactly one trailing slash."""
    return value.rstrip("/") + "/"


@dataclass(frozen=True)
class Session:
    """Authenticated storage context, created once per run."""

    storage_url: str
    auth_token: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "storage_url", normalize_prefix(self.storage_url))

    def __repr__(self) -> str:
        return f"Session(storage_url={self.storage_url!r}, auth_token='***')"


@dataclass(frozen=True)
class UploadTask:
    """One local file headed for one destination directory."""

    destination_prefix: str
    source_path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "destination_prefix", normalize_prefix(self.destination_prefix))
        object.__setattr__(self, "source_path", Path(self.source_path))

    @property
    def object_name(self) -> str:
        return f"{self.destination_prefix}{self.source_path.name}"


@dataclass(frozen=True)
class StorageResponse:
    """Typed view of an HTTP response from the auth or storage endpoint."""

    status_code: int
    reason: str = ""
    etag: Optional[str] = None
    storage_url: Optional[str] = None
    auth_token: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def raw(self) -> str:
        """Render the response the way it came off the wire, for diagnostics."""
        lines = [f"HTTP {self.status_code} {self.reason}".rstrip()]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        if self.body:
            lines.append("")
            lines.append(self.body)
        return "\n".join(lines)


class OutcomeStatus(str, Enum):
    SKIPPED = "skipped"
    UPLOADED = "uploaded"
    FAILED = "failed"


class FailureReason(str, Enum):
    NOT_A_FILE = "not_a_file"
    DIGEST_COMPUTE_ERROR = "digest_compute_error"
    SOURCE_READ_ERROR = "source_read_error"
    TRANSFER_NO_CONFIRMATION = "transfer_no_confirmation"
    INTEGRITY_MISMATCH = "integrity_mismatch"
    TRANSFER_ERROR = "transfer_error"


@dataclass(frozen=True)
class TransferOutcome:
    """Result of one task: skipped, uploaded with a digest, or failed with a reason."""

    status: OutcomeStatus
    task: UploadTask
    url: str = ""
    digest: Optional[str] = None
    reason: Optional[FailureReason] = None
    expected: Optional[str] = None
    reported: Optional[str] = None
    detail: str = ""

    @classmethod
    def skipped(cls, task: UploadTask, url: str, digest: str) -> "TransferOutcome":
        return cls(OutcomeStatus.SKIPPED, task, url=url, digest=digest)

    @classmethod
    def uploaded(cls, task: UploadTask, url: str, digest: str) -> "TransferOutcome":
        return cls(OutcomeStatus.UPLOADED, task, url=url, digest=digest)

    @classmethod
    def failed(
        cls,
        task: UploadTask,
        url: str,
        reason: FailureReason,
        detail: str = "",
        expected: Optional[str] = None,
        reported: Optional[str] = None,
    ) -> "TransferOutcome":
        return cls(
            OutcomeStatus.FAILED,
            task,
            url=url,
            reason=reason,
            detail=detail,
            expected=expected,
            reported=reported,
        )


@dataclass
class RunSummary:
    """Outcomes of one run, in processing order."""

    outcomes: List[TransferOutcome] = field(default_factory=list)

    def add(self, outcome: TransferOutcome) -> None:
        self.outcomes.append(outcome)

    def count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)

    @property
    def skipped(self) -> int:
        return self.count(OutcomeStatus.SKIPPED)

    @property
    def uploaded(self) -> int:
        return self.count(OutcomeStatus.UPLOADED)

    @property
    def failed(self) -> int:
        return self.count(OutcomeStatus.FAILED)

    @property
    def exit_code(self) -> int:
        return 1 if self.failed else 0
