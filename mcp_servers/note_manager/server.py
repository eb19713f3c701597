"""
Note Manager MCP Server

Exposes the note operations (create, list/search, get, update, delete) as
Model Context Protocol tools over the same JSON file the HTTP API uses.
Runs on port 8001 with SSE transport.
"""

import logging
from datetime import UTC, datetime

from mcp.server.fastmcp import FastMCP

from notes_api.config import settings
from notes_api.errors import NotFoundError
from notes_api.models import Note, NoteCreate, NoteUpdate
from notes_api.service import NoteManager
from notes_api.storage import JsonFileStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("note_manager")

# ---------------------------------------------------------------------------
# MCP server + storage
# ---------------------------------------------------------------------------
mcp = FastMCP("note-manager", host=settings.mcp_host, port=settings.mcp_port)
store = JsonFileStore(settings.notes_file)
store.initialize()
notes = NoteManager(store)


def _dump(note: Note) -> dict:
    return note.model_dump(by_alias=True, mode="json")


def _not_found(exc: NotFoundError) -> dict:
    return {"error": str(exc), "note_id": exc.note_id}


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
def create_note(title: str, content: str, tags: list[str] | None = None) -> dict:
    """Save a new note with a title, content, and optional tags.

    Use this tool when the user wants to create, store, or remember a piece
    of information for later retrieval.

    Args:
        title: Short descriptive title for the note (1-200 characters).
        content: The full body / text of the note (may be empty).
        tags: Optional list of tags for categorisation.

    Returns:
        The created note, including its generated id and timestamps.
    """
    note = notes.create(NoteCreate(title=title, content=content, tags=tags or []))
    logger.info("Tool create_note invoked: id=%s", note.id)
    return _dump(note)


@mcp.tool()
def list_notes(search: str | None = None) -> dict:
    """List stored notes, optionally filtered by a search term.

    The search is a case-insensitive substring match against the title,
    the content and every tag of each note.

    Args:
        search: Optional text to look for.

    Returns:
        Dictionary with the matching notes and their count.
    """
    found = notes.find_all(search)
    logger.info("Tool list_notes invoked: search=%r, found=%d", search, len(found))
    return {"count": len(found), "notes": [_dump(n) for n in found]}


@mcp.tool()
def get_note(note_id: str) -> dict:
    """Fetch a single note by its id.

    Args:
        note_id: The id returned when the note was created.

    Returns:
        The note, or an error entry if no note has that id.
    """
    try:
        return _dump(notes.find_one(note_id))
    except NotFoundError as exc:
        return _not_found(exc)


@mcp.tool()
def update_note(
    note_id: str,
    title: str | None = None,
    content: str | None = None,
    tags: list[str] | None = None,
) -> dict:
    """Change some fields of an existing note.

    Fields left out keep their current value.

    Args:
        note_id: The id of the note to change.
        title: New title.
        content: New content.
        tags: New list of tags, replacing the old one.

    Returns:
        The updated note, or an error entry if no note has that id.
    """
    patch = NoteUpdate(title=title, content=content, tags=tags)
    try:
        note = notes.update(note_id, patch)
    except NotFoundError as exc:
        return _not_found(exc)
    logger.info("Tool update_note invoked: id=%s", note_id)
    return _dump(note)


@mcp.tool()
def delete_note(note_id: str) -> dict:
    """Permanently delete a note.

    Args:
        note_id: The id of the note to delete.

    Returns:
        Confirmation message, or an error entry if no note has that id.
    """
    try:
        notes.remove(note_id)
    except NotFoundError as exc:
        return _not_found(exc)
    logger.info("Tool delete_note invoked: id=%s", note_id)
    return {"note_id": note_id, "message": f"Note {note_id} deleted."}


@mcp.tool()
def health_check() -> dict:
    """Check whether the Note Manager server is healthy.

    Use this tool to verify the server is running and responsive.

    Returns:
        Dictionary with server status, note count, and timestamp.
    """
    logger.info("Tool health_check invoked")
    return {
        "status": "healthy",
        "server": "note-manager",
        "total_notes": notes.count(),
        "timestamp": datetime.now(UTC).isoformat(),
    }


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logger.info("Starting Note Manager MCP server on port %d ...", settings.mcp_port)
    mcp.run(transport="sse")
