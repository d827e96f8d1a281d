"""Recursive source-tree walker shared by the text-scanning detectors."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset({"node_modules", ".next", ".git", "dist", "build"})


def walk_files(root: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield files under ``root`` whose suffix is in ``extensions``.

    Directories named in EXCLUDED_DIRS are skipped by exact name. A
    directory that cannot be listed contributes nothing.
    """
    suffixes = tuple(extensions)
    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.debug("Skipping unreadable directory %s: %s", root, e)
        return

    for entry in entries:
        try:
            if entry.is_dir(follow_symlinks=False):
                if entry.name not in EXCLUDED_DIRS:
                    yield from walk_files(Path(entry.path), suffixes)
            elif entry.is_file() and entry.name.endswith(suffixes):
                yield Path(entry.path)
        except OSError as e:
            logger.debug("Skipping %s: %s", entry.path, e)


def read_lines(path: Path) -> list[str] | None:
    """Return the file's lines, or None if it can't be read as text."""
    try:
        return path.read_text(encoding="utf-8", errors="replace").split("\n")
    except OSError as e:
        logger.debug("Skipping unreadable file %s: %s", path, e)
        return None


def relative_name(path: Path, base: Path) -> str:
    """Display path relative to ``base`` with forward slashes."""
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()
