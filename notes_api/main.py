"""FastAPI application for the notes service.

Endpoints:
  POST   /notes         - Create a note
  GET    /notes         - List notes, optionally filtered by ?search=
  GET    /notes/{id}    - Fetch one note
  PATCH  /notes/{id}    - Partially update a note
  DELETE /notes/{id}    - Delete a note
  GET    /health        - Service and storage status
  GET    /metrics       - Prometheus metrics
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

from notes_api.config import settings
from notes_api.errors import NotFoundError, StorageError
from notes_api.metrics import HTTP_DURATION, HTTP_REQUESTS
from notes_api.models import Note, NoteCreate, NoteUpdate
from notes_api.service import NoteManager
from notes_api.storage import JsonFileStore

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

# --- Global instances ---
store = JsonFileStore(settings.notes_file)
manager = NoteManager(store)

# Endpoints excluded from HTTP metrics
_METRICS_EXCLUDE = {"/metrics", "/openapi.json", "/docs", "/redoc"}


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request count and duration for Prometheus."""

    async def dispatch(self, request: Request, call_next):
        """Wrap each request with timing and counting."""
        path = request.url.path
        if path in _METRICS_EXCLUDE:
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        # Use the route template so note ids don't become label values.
        route = request.scope.get("route")
        endpoint = getattr(route, "path", path)
        HTTP_REQUESTS.labels(
            method=request.method,
            endpoint=endpoint,
            status_code=response.status_code,
        ).inc()
        HTTP_DURATION.labels(endpoint=endpoint).observe(elapsed)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: make sure the notes file exists."""
    logger.info("Initializing note storage at %s", settings.notes_file)
    store.initialize()
    yield
    logger.info("Notes API shut down.")


app = FastAPI(
    title="Quick Notes API",
    description="Create, search, update and delete short notes stored in a JSON file.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_manager() -> NoteManager:
    """FastAPI dependency returning the process-wide NoteManager."""
    return manager


# --- Error mapping ---


@app.exception_handler(NotFoundError)
async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    """Storage failures are server errors; details stay in the log."""
    logger.error(
        "Storage failure on %s %s: %s",
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage failure"},
    )


# --- Notes endpoints ---


@app.post("/notes", response_model=Note, status_code=status.HTTP_201_CREATED)
def create_note(payload: NoteCreate, notes: NoteManager = Depends(get_manager)) -> Note:
    """Create a note. id and timestamps are set by the server."""
    return notes.create(payload)


@app.get("/notes", response_model=list[Note])
def list_notes(
    search: str | None = Query(
        None, description="Case-insensitive match on title, content or tags."
    ),
    notes: NoteManager = Depends(get_manager),
) -> list[Note]:
    """List all notes in creation order, optionally filtered."""
    return notes.find_all(search)


@app.get("/notes/{note_id}", response_model=Note)
def get_note(note_id: str, notes: NoteManager = Depends(get_manager)) -> Note:
    """Fetch a single note by id."""
    return notes.find_one(note_id)


@app.patch("/notes/{note_id}", response_model=Note)
def update_note(
    note_id: str, payload: NoteUpdate, notes: NoteManager = Depends(get_manager)
) -> Note:
    """Update only the fields present in the body."""
    return notes.update(note_id, payload)


@app.delete("/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(note_id: str, notes: NoteManager = Depends(get_manager)) -> Response:
    """Delete a note permanently."""
    notes.remove(note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Service endpoints ---


@app.get("/health")
def health(notes: NoteManager = Depends(get_manager)) -> JSONResponse:
    """Report whether the notes file can be read."""
    timestamp = datetime.now(UTC).isoformat()
    try:
        count = notes.count()
    except StorageError as exc:
        logger.warning("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unhealthy", "error": str(exc), "timestamp": timestamp},
        )
    body: dict[str, Any] = {"status": "healthy", "notes": count, "timestamp": timestamp}
    return JSONResponse(content=body)


@app.get("/metrics")
def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
