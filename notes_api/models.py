"""Pydantic models for notes and the payloads that create or change them."""

from datetime import UTC, datetime
from typing import Annotated

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TITLE_MAX_LENGTH = 200
CONTENT_MAX_LENGTH = 10_000
TAG_MAX_LENGTH = 50

Tag = Annotated[str, Field(max_length=TAG_MAX_LENGTH)]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class _CamelModel(BaseModel):
    """Serializes as camelCase, accepts either camelCase or snake_case input."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Note(_CamelModel):
    """A single stored note.

    Also the schema of each record in the notes file, so every field is
    required: a record missing one is corrupt, not filled in.
    """

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(..., max_length=CONTENT_MAX_LENGTH)
    tags: list[Tag]
    created_at: AwareDatetime = Field(..., description="ISO-8601 creation timestamp")
    updated_at: AwareDatetime = Field(..., description="ISO-8601 last update timestamp")


class NoteCreate(_CamelModel):
    """Payload for creating a note."""

    title: str = Field(..., min_length=1, max_length=TITLE_MAX_LENGTH, description="Note title")
    content: str = Field(..., max_length=CONTENT_MAX_LENGTH, description="Note body, may be empty")
    tags: list[Tag] = Field(default_factory=list, description="Optional list of tags")


class NoteUpdate(_CamelModel):
    """Payload for a partial update.

    Only the fields the caller actually sends are merged into the stored note.
    Unknown keys, including ``id`` and the timestamps, are ignored.
    """

    title: str | None = Field(None, min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str | None = Field(None, max_length=CONTENT_MAX_LENGTH)
    tags: list[Tag] | None = None

    def changes(self) -> dict:
        """Fields explicitly provided with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
