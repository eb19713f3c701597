"""Whole-collection persistence for notes.

A store only ever reads or writes the complete collection. There is no
locking: two overlapping read-modify-write cycles end with whichever save
finished last.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Protocol, Sequence

from pydantic import TypeAdapter, ValidationError

from .errors import StorageCorruptError, StorageUnavailableError
from .models import Note

logger = logging.getLogger(__name__)

_NOTES = TypeAdapter(list[Note])
EMPTY_COLLECTION = b"[]"

# Reading the umask means setting it; put it straight back.
_UMASK = os.umask(0)
os.umask(_UMASK)


class NoteStore(Protocol):
    """Contract shared by every note store."""

    def initialize(self) -> None: ...

    def load_all(self) -> list[Note]: ...

    def save_all(self, notes: Sequence[Note]) -> None: ...


class JsonFileStore:
    """Keeps the note collection as a JSON array in a single file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def initialize(self) -> None:
        """Create the parent directory and an empty collection if missing.

        Safe to call on every start; an existing file is left untouched.
        """
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if self._path.exists():
                logger.info("Using existing notes file %s", self._path)
                return
            self._write_atomic(EMPTY_COLLECTION)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot initialize notes file {self._path}: {exc}"
            ) from exc
        logger.info("Created empty notes file %s", self._path)

    def load_all(self) -> list[Note]:
        """Read every note, in persisted order."""
        try:
            raw = self._path.read_bytes()
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot read notes file {self._path}: {exc}"
            ) from exc

        try:
            notes = _NOTES.validate_json(raw)
        except ValidationError as exc:
            raise StorageCorruptError(
                f"Notes file {self._path} is not a valid note collection: "
                f"{exc.error_count()} error(s)"
            ) from exc

        logger.debug("Loaded %d notes from %s", len(notes), self._path)
        return notes

    def save_all(self, notes: Sequence[Note]) -> None:
        """Replace the whole collection with ``notes``."""
        payload = _NOTES.dump_json(list(notes), by_alias=True, indent=2)
        try:
            self._write_atomic(payload)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot write notes file {self._path}: {exc}"
            ) from exc
        logger.debug("Saved %d notes to %s", len(notes), self._path)

    def _file_mode(self) -> int:
        # NamedTemporaryFile is created 0600; keep the mode the file already
        # has, or what a plain open() would have given a new file.
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            return 0o666 & ~_UMASK

    def _write_atomic(self, payload: bytes) -> None:
        # Readers see either the old file or the new one, never a partial write.
        with tempfile.NamedTemporaryFile(
            "wb",
            dir=self._path.parent,
            prefix=f".{self._path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            try:
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
                os.chmod(tmp_path, self._file_mode())
            except OSError:
                tmp.close()
                tmp_path.unlink(missing_ok=True)
                raise
        try:
            os.replace(tmp_path, self._path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise


class InMemoryStore:
    """Store with the same contract as :class:`JsonFileStore`, held in memory."""

    def __init__(self, notes: Sequence[Note] | None = None) -> None:
        self._notes: list[Note] | None = None
        if notes is not None:
            self.save_all(notes)

    def initialize(self) -> None:
        if self._notes is None:
            self._notes = []

    def load_all(self) -> list[Note]:
        if self._notes is None:
            raise StorageUnavailableError("In-memory store has not been initialized")
        return [n.model_copy(deep=True) for n in self._notes]

    def save_all(self, notes: Sequence[Note]) -> None:
        self._notes = [n.model_copy(deep=True) for n in notes]
