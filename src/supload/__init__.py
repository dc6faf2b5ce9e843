"""supload - Upload changed files to Swift-compatible cloud storage."""

__version__ = "1.1.0"

from supload.config import Config
from supload.sync_engine import UploadEngine

__all__ = ["UploadEngine", "Config", "__version__"]
