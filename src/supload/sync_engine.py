"""Differential upload engine for Swift-compatible storage."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console

from supload.checksum import ChecksumCalculator
from supload.config import Config
from supload.content_type import resolve_content_type
from supload.exceptions import (
    ConfigurationError,
    DigestComputeError,
    IntegrityMismatch,
    SourceNotAFileError,
    SourceReadError,
    TaskError,
    TransferNoConfirmation,
    TransportUnreachable,
)
from supload.models import (
    FailureReason,
    OutcomeStatus,
    RunSummary,
    Session,
    TransferOutcome,
    UploadTask,
)
from supload.transport import StorageClient, object_url
from supload.walker import walk

logger = logging.getLogger(__name__)

FAILURE_REASONS = {
    SourceNotAFileError: FailureReason.NOT_A_FILE,
    DigestComputeError: FailureReason.DIGEST_COMPUTE_ERROR,
    SourceReadError: FailureReason.SOURCE_READ_ERROR,
    TransferNoConfirmation: FailureReason.TRANSFER_NO_CONFIRMATION,
    IntegrityMismatch: FailureReason.INTEGRITY_MISMATCH,
    TransportUnreachable: FailureReason.TRANSFER_ERROR,
}


class UploadEngine:
    """Decides, per file, whether to skip or upload, then verifies the upload."""

    def __init__(
        self,
        config: Config,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        """Initialize the engine."""
        self.config = config
        self.console = console or Console()
        self.error_console = error_console or Console(stderr=True)
        self.checksum_calculator = ChecksumCalculator(chunk_size=config.transfer.chunk_size)

        # Created lazily so timeout and TLS overrides are picked up
        self._storage_client: Optional[StorageClient] = None

    @property
    def storage_client(self) -> StorageClient:
        """Get the storage client, creating it lazily with current config."""
        if self._storage_client is None:
            self._storage_client = StorageClient(
                timeout=self.config.transfer.timeout,
                verify_ssl=self.config.transfer.verify_ssl,
            )
        return self._storage_client

    def close(self) -> None:
        if self._storage_client is not None:
            self._storage_client.close()
            self._storage_client = None

    def connect(self) -> Session:
        """
        Authenticate with the configured credentials.

        Raises:
            ConfigurationError: If user or key is missing
            AuthenticationError: If the handshake fails
        """
        missing = self.config.missing_credentials()
        if missing:
            raise ConfigurationError(f"Missing params: {', '.join(missing)}")

        auth = self.config.auth
        return self.storage_client.authenticate(auth.auth_url, auth.user, auth.key)

    def run(
        self,
        session: Session,
        destination: str,
        source: Path,
        recursive: Optional[bool] = None,
    ) -> RunSummary:
        """
        Upload a file, or a directory tree in recursive mode.

        Args:
            session: Authenticated storage session
            destination: Destination directory, starting with the container name
            source: Local file, or directory when recursive
            recursive: Override the configured recursive mode

        Returns:
            Outcomes of every task, in processing order

        Raises:
            PreconditionError: If the destination container does not exist
            ConfigurationError: If recursive mode is given a non-directory
        """
        if recursive is None:
            recursive = self.config.transfer.recursive
        source = Path(source).resolve()

        self.storage_client.check_container(session, destination)

        if recursive:
            if not source.is_dir():
                raise ConfigurationError(f"{source} is not dir")
            tasks: Iterable[UploadTask] = walk(source, destination)
        else:
            tasks = [UploadTask(destination, source)]

        summary = RunSummary()
        for task in tasks:
            outcome = self.decide_and_execute(session, task)
            self._report(outcome)
            summary.add(outcome)

        logger.info(
            "Run finished: %d uploaded, %d skipped, %d failed",
            summary.uploaded,
            summary.skipped,
            summary.failed,
        )
        return summary

    def decide_and_execute(self, session: Session, task: UploadTask) -> TransferOutcome:
        """
        Skip, upload or fail a single task.

        Holds no state between calls, so tasks may be scheduled in any order.
        """
        url = object_url(session, task.object_name)
        try:
            return self._execute(session, task, url)
        except TaskError as e:
            reason = FAILURE_REASONS.get(type(e), FailureReason.TRANSFER_ERROR)
            return TransferOutcome.failed(
                task,
                url,
                reason,
                detail=e.details.get("response", e.message),
                expected=e.details.get("expected"),
                reported=e.details.get("reported"),
            )

    def _execute(self, session: Session, task: UploadTask, url: str) -> TransferOutcome:
        source = task.source_path
        digest_check = self.config.transfer.digest_check

        if not source.is_file():
            raise SourceNotAFileError("Source file doesn't exist!", details={"source": str(source)})

        local_digest = None
        if digest_check:
            local_digest = self.checksum_calculator.calculate_md5(source)
            remote_digest = self._probe_remote(session, url)
            if remote_digest is not None and remote_digest.lower() == local_digest:
                return TransferOutcome.skipped(task, url, local_digest)

        content_type = resolve_content_type(source)

        self._info(f"[.] Uploading to {url}")
        response = self.storage_client.put_object(
            session, url, source, content_type, etag=local_digest
        )

        if not response.etag:
            raise TransferNoConfirmation("Upload failed", details={"response": response.raw()})

        if digest_check and response.etag != local_digest:
            raise IntegrityMismatch(reported=response.etag, expected=local_digest)

        return TransferOutcome.uploaded(task, url, response.etag)

    def _probe_remote(self, session: Session, url: str) -> Optional[str]:
        """Remote digest, or None when it cannot be confirmed."""
        try:
            return self.storage_client.probe(session, url)
        except TransportUnreachable as e:
            # Not evidence of identity: fall through to upload
            logger.warning("Could not check %s, uploading anyway: %s", url, e.message)
            return None

    def _report(self, outcome: TransferOutcome) -> None:
        """Print an outcome for the operator."""
        if outcome.status is OutcomeStatus.SKIPPED:
            self._info(f"[-] File {outcome.task.source_path} already uploaded")
        elif outcome.status is OutcomeStatus.UPLOADED:
            self._info(f"[*] Upload OK! url={outcome.url} etag={outcome.digest}")
        elif outcome.reason is FailureReason.INTEGRITY_MISMATCH:
            self._error(
                f"[!] Upload error: etag({outcome.reported}) != md5hex({outcome.expected}) url={outcome.url}"
            )
        elif outcome.reason is FailureReason.TRANSFER_NO_CONFIRMATION:
            self._error(f"[!] Upload failed: {outcome.url}")
            self._error(outcome.detail)
        elif outcome.reason is FailureReason.NOT_A_FILE:
            self._error(f"[!] Source file doesn't exist! {outcome.task.source_path}")
        elif outcome.reason is FailureReason.DIGEST_COMPUTE_ERROR:
            self._error(f"[!] Can not calc file hash: {outcome.detail}")
        elif outcome.reason is FailureReason.SOURCE_READ_ERROR:
            self._error(f"[!] Upload failed: {outcome.detail}")
        else:
            self._error(f"[!] Upload failed: {outcome.url}: {outcome.detail}")

    def _info(self, message: str) -> None:
        if not self.config.transfer.quiet:
            self.console.print(message, markup=False, highlight=False, soft_wrap=True)

    def _error(self, message: str) -> None:
        self.error_console.print(message, style="red", markup=False, highlight=False, soft_wrap=True)
