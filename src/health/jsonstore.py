"""File-backed JSON documents with atomic writes and an in-process write lock.

Each document is read-modify-written as a whole. ``transaction()`` holds a
per-path lock for the full cycle so concurrent runs inside one process
can't interleave. Other processes are not excluded.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class JsonDocument:
    """One JSON file on disk."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    def read(self, default: Any = None) -> Any:
        """Parsed content, or ``default`` when missing or corrupt. Never raises."""
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return default
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Ignoring unreadable state file %s: %s", self.path, e)
            return default

    def write(self, data: Any) -> None:
        """Atomically replace the file. Errors propagate."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp, self.path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise

    def delete(self) -> bool:
        """Remove the file. False if it wasn't there."""
        try:
            self.path.unlink()
            return True
        except FileNotFoundError:
            return False

    @contextmanager
    def transaction(self) -> Iterator[JsonDocument]:
        """Hold the document's lock for a read-modify-write cycle."""
        with self._lock:
            yield self
