"""Recursive enumeration of upload tasks under a source directory."""

import os
from pathlib import Path
from typing import Iterator

from supload.models import UploadTask, normalize_prefix


def walk(root: Path, destination_prefix: str) -> Iterator[UploadTask]:
    """
    Yield one UploadTask per regular file under ``root``.

    Each task's destination keeps the file's directory relative to ``root``,
    appended to ``destination_prefix``. Symlinks are neither followed nor
    uploaded, and directories never become tasks.
    """
    root = Path(root)
    prefix = normalize_prefix(destination_prefix)

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        relative_dir = Path(dirpath).relative_to(root).as_posix()
        if relative_dir == ".":
            task_prefix = prefix
        else:
            task_prefix = normalize_prefix(prefix + relative_dir)

        for filename in sorted(filenames):
            file_path = Path(dirpath) / filename
            # regular files only, as with find -type f
            if file_path.is_symlink() or not file_path.is_file():
                continue
            yield UploadTask(task_prefix, file_path)
