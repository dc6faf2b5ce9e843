"""Best-effort MIME detection for upload Content-Type headers."""

import logging
from pathlib import Path

import magic

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def resolve_content_type(file_path: Path) -> str:
    """Guess the MIME type of a file from its contents, like ``file -i``.

    Never raises; anything inconclusive falls back to a generic binary type.
    """
    try:
        detected = magic.Magic(mime=True).from_file(str(file_path))
    except Exception as e:
        logger.debug("MIME detection failed for %s: %s", file_path, e)
        return DEFAULT_CONTENT_TYPE
    return detected or DEFAULT_CONTENT_TYPE
