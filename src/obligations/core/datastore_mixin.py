#!/usr/bin/env python3
"""
DataStore Mixin - Common functionality for all store implementations.

Provides the optional JSON-file persistence, the locking that conditional
updates run under, and the shared metadata methods.

File-backed stores may be shared by several engine processes. Every write
holds an inter-process lock on `<file>.lock` and reloads the file before
checking its condition, so a uniqueness check always sees the writes of
other instances and a rewrite never drops them. Reads reload only when the
file has been replaced since it was last loaded.
"""

import logging
import os
import threading
from abc import abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from filelock import FileLock

from .json_utils import read_json, write_json

logger = logging.getLogger(__name__)


class JsonStoreMixin:
    """
    Mixin providing common store functionality.

    Provides:
    - A re-entrant in-process lock plus an inter-process file lock
    - Loading/saving a list of record dicts from/to an optional JSON file
    - Common metadata methods (exists, last_modified, age_days)

    Subclasses must implement:
    - _records_to_json() -> list[dict]
    - _records_from_json(list[dict]) -> None
    - item_count() -> int
    - summary_text() -> str

    Subclass methods wrap reads in `_reading()` and every mutation in
    `_writing()`.
    """

    def __init__(self, path: Path | None = None):
        """
        Initialize mixin state.

        Args:
            path: JSON file to persist to, or None for a purely in-memory store
        """
        self.path = path
        self._lock = threading.RLock()
        self._file_lock = FileLock(f"{path}.lock") if path is not None else None
        self._loaded_signature: tuple[int, int, int] | None = None
        self._write_depth = 0

    def _file_signature(self) -> tuple[int, int, int] | None:
        if self.path is None:
            return None
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            return None
        return (st.st_mtime_ns, st.st_ino, st.st_size)

    def _load(self) -> None:
        """Populate records from the backing file, if there is one."""
        if self.path is None or not self.path.exists():
            return
        signature = self._file_signature()
        data = read_json(self.path)
        if not isinstance(data, list):
            raise ValueError(f"Invalid store file {self.path}: expected a list, got {type(data).__name__}")
        self._records_from_json(data)
        self._loaded_signature = signature
        logger.debug("Loaded %d records from %s", self.item_count(), self.path)

    def _refresh(self) -> None:
        """Reload if another instance has replaced the backing file."""
        signature = self._file_signature()
        if signature is not None and signature != self._loaded_signature:
            logger.debug("Store file %s changed on disk, reloading", self.path)
            self._load()

    def _persist(self) -> None:
        """Write all records to the backing file. Callers are inside `_writing()`."""
        if self.path is None:
            return
        write_json(self.path, self._records_to_json())
        self._loaded_signature = self._file_signature()

    @contextmanager
    def _reading(self) -> Iterator[None]:
        """Hold the in-process lock over a fresh view of the records."""
        with self._lock:
            if self._write_depth == 0:
                self._refresh()
            yield

    @contextmanager
    def _writing(self) -> Iterator[None]:
        """
        Hold both locks for a read-check-write sequence.

        The outermost entry reloads the backing file unconditionally, so the
        condition is evaluated against what is on disk right now.
        """
        with self._lock:
            if self._file_lock is None:
                yield
                return
            self.path.parent.mkdir(parents=True, exist_ok=True)  # type: ignore[union-attr]
            with self._file_lock:
                self._write_depth += 1
                try:
                    if self._write_depth == 1:
                        self._load()
                    yield
                except Exception:
                    # Next read reloads from disk, discarding unpersisted edits
                    self._loaded_signature = None
                    raise
                finally:
                    self._write_depth -= 1

    @abstractmethod
    def _records_to_json(self) -> list[dict[str, Any]]: ...

    @abstractmethod
    def _records_from_json(self, data: list[dict[str, Any]]) -> None: ...

    @abstractmethod
    def item_count(self) -> int:
        """Get count of records currently held."""
        ...

    @abstractmethod
    def summary_text(self) -> str:
        """Get human-readable summary of current store state."""
        ...

    def exists(self) -> bool:
        """Check if the backing file exists."""
        return self.path is not None and self.path.exists()

    def last_modified(self) -> datetime | None:
        """Get timestamp of the backing file."""
        if not self.exists():
            return None
        return datetime.fromtimestamp(self.path.stat().st_mtime)  # type: ignore[union-attr]

    def age_days(self) -> int | None:
        """
        Get age of data in days since last modification.

        Returns:
            Number of days since last modification, or None if data doesn't exist
        """
        last_mod = self.last_modified()
        if last_mod is None:
            return None
        return (datetime.now() - last_mod).days
