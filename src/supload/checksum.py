"""MD5 digest calculation matching the Swift ETag scheme."""

import hashlib
import logging
from pathlib import Path

from supload.exceptions import DigestComputeError

logger = logging.getLogger(__name__)


class ChecksumCalculator:
    """Computes MD5 hex digests of local files."""

    def __init__(self, chunk_size: int = 8192):
        self.chunk_size = chunk_size

    def calculate_md5(self, file_path: Path) -> str:
        """
        Calculate the MD5 digest of a file.

        The file is re-read on every call; nothing is cached.

        Args:
            file_path: Path to the file

        Returns:
            Lowercase hex digest

        Raises:
            DigestComputeError: If the file is missing, unreadable or reading fails
        """
        file_path = Path(file_path)
        md5_hash = hashlib.md5()

        try:
            with open(file_path, "rb") as f:
                for chunk in iter(lambda: f.read(self.chunk_size), b""):
                    md5_hash.update(chunk)
        except FileNotFoundError as e:
            raise DigestComputeError(f"No such file: {file_path}") from e
        except PermissionError as e:
            raise DigestComputeError(f"File is not readable: {file_path}") from e
        except OSError as e:
            raise DigestComputeError(f"Can not calc file hash for {file_path}: {e}") from e

        digest = md5_hash.hexdigest()
        logger.debug("MD5 for %s: %s", file_path, digest)
        return digest

