"""
Filesystem Source

Collects source files from a working tree, skipping ignored directories.
Results are sorted by relative path so repeated scans see the same order.
"""

import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, Field

from codegraph_depgraph.exceptions import SourceError
from codegraph_depgraph.logging import get_logger

logger = get_logger(__name__)


class SourceFile(BaseModel):
    """One file to scan: path relative to the scan root (posix) and its text."""

    path: str = Field(..., min_length=1)
    content: str

    model_config = {"frozen": True}


def has_extension(path: str, extensions: Iterable[str]) -> bool:
    return any(path.endswith(ext) for ext in extensions)


def is_ignored(relative_path: str, ignored_dirs: Iterable[str]) -> bool:
    """Whether any directory segment of a posix relative path is ignored."""
    ignored = set(ignored_dirs)
    return any(part in ignored for part in relative_path.split("/")[:-1])


def walk_directory(
    root: str | Path,
    extensions: Iterable[str],
    ignored_dirs: Iterable[str] = (),
) -> list[SourceFile]:
    """
    Read every file under ``root`` with one of the given extensions.

    Args:
        root: Directory to walk
        extensions: File suffixes to keep (e.g. ".ts")
        ignored_dirs: Directory names never descended into

    Returns:
        SourceFiles sorted by relative path

    Raises:
        SourceError: If root is not a directory
    """
    root_path = Path(root).resolve()
    if not root_path.is_dir():
        raise SourceError(f"Not a directory: {root}", {"path": str(root_path)})

    extensions = tuple(extensions)
    ignored = set(ignored_dirs)
    files: list[SourceFile] = []

    for dirpath, dirnames, filenames in os.walk(root_path):
        dirnames[:] = [name for name in dirnames if name not in ignored]

        for filename in filenames:
            if not has_extension(filename, extensions):
                continue

            absolute = Path(dirpath) / filename
            relative = absolute.relative_to(root_path).as_posix()
            try:
                content = absolute.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("file_read_failed", file=relative, error=str(e))
                continue

            files.append(SourceFile(path=relative, content=content))

    files.sort(key=lambda f: f.path)
    logger.debug("directory_walked", root=str(root_path), files=len(files))
    return files
