"""Note operations as read-all / transform / write-all cycles over a store.

Every call reloads the full collection, so nothing is cached between calls.
Nothing serializes concurrent callers either: when two mutating calls
overlap, the one that saves last overwrites the other's whole collection.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Callable, Iterator
from uuid import uuid4

from .errors import NotFoundError, StorageError
from .metrics import NOTE_OPERATIONS, NOTES_STORED
from .models import Note, NoteCreate, NoteUpdate, utc_now
from .storage import NoteStore

logger = logging.getLogger(__name__)


@contextmanager
def _track(operation: str) -> Iterator[None]:
    """Count the outcome of one operation."""
    try:
        yield
    except NotFoundError:
        NOTE_OPERATIONS.labels(operation=operation, status="not_found").inc()
        raise
    except StorageError:
        NOTE_OPERATIONS.labels(operation=operation, status="storage_error").inc()
        raise
    NOTE_OPERATIONS.labels(operation=operation, status="success").inc()


def _index_of(notes: list[Note], note_id: str) -> int:
    for i, note in enumerate(notes):
        if note.id == note_id:
            return i
    raise NotFoundError(note_id)


def _matches(note: Note, term: str) -> bool:
    return (
        term in note.title.lower()
        or term in note.content.lower()
        or any(term in tag.lower() for tag in note.tags)
    )


class NoteManager:
    """Create, list, fetch, update and delete notes held in a :class:`NoteStore`."""

    def __init__(
        self, store: NoteStore, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self._store = store
        self._clock = clock

    def _save(self, notes: list[Note]) -> None:
        self._store.save_all(notes)
        NOTES_STORED.set(len(notes))

    def create(self, data: NoteCreate) -> Note:
        """Append a new note and persist the collection."""
        with _track("create"):
            now = self._clock()
            note = Note(
                id=str(uuid4()),
                title=data.title,
                content=data.content,
                tags=list(data.tags),
                created_at=now,
                updated_at=now,
            )
            notes = self._store.load_all()
            notes.append(note)
            self._save(notes)
        logger.info("Created note %s title='%s'", note.id, note.title)
        return note

    def find_all(self, search: str | None = None) -> list[Note]:
        """Return every note, or those whose title, content or a tag contains
        ``search`` (case-insensitive). Original order is kept."""
        with _track("list"):
            notes = self._store.load_all()
        if not search:
            return notes
        term = search.lower()
        return [n for n in notes if _matches(n, term)]

    def find_one(self, note_id: str) -> Note:
        """Return the note with ``note_id``."""
        with _track("get"):
            notes = self._store.load_all()
            return notes[_index_of(notes, note_id)]

    def update(self, note_id: str, patch: NoteUpdate) -> Note:
        """Merge the provided fields of ``patch`` into the note, in place."""
        with _track("update"):
            notes = self._store.load_all()
            index = _index_of(notes, note_id)
            current = notes[index]
            changes = patch.changes()
            # Never earlier than creation, even if the clock steps back.
            updated_at = max(self._clock(), current.created_at)
            updated = current.model_copy(update={**changes, "updated_at": updated_at})
            notes[index] = updated
            self._save(notes)
        logger.info("Updated note %s fields=%s", note_id, sorted(changes))
        return updated

    def remove(self, note_id: str) -> None:
        """Delete the note with ``note_id``."""
        with _track("delete"):
            notes = self._store.load_all()
            del notes[_index_of(notes, note_id)]
            self._save(notes)
        logger.info("Deleted note %s", note_id)

    def count(self) -> int:
        """Number of stored notes."""
        return len(self._store.load_all())
