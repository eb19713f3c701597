"""Exceptions raised by the notes core.

Transports (the FastAPI app, the MCP server) translate these into their own
responses; the core itself never catches or retries them.
"""

from __future__ import annotations


class NotesError(Exception):
    """Base class for every error raised by the notes core."""


class NotFoundError(NotesError):
    """No note with the requested id exists in the collection."""

    def __init__(self, note_id: str) -> None:
        self.note_id = note_id
        super().__init__(f'Note with ID "{note_id}" not found')


class StorageError(NotesError):
    """The durable note collection could not be used."""


class StorageUnavailableError(StorageError):
    """The backing file could not be read or written."""


class StorageCorruptError(StorageError):
    """The backing file exists but does not hold a valid note collection."""
