# src/toyclaw/models/chunk.py
"""Chunk and index manifest models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Chunk(BaseModel):
    """A contiguous slice of a source document's extracted text.

    The id is composite (market/filename#sequence) and unique within an index.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    market: str
    source: str
    section: str

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("chunk text must not be empty")
        return value


class RetrievedChunk(Chunk):
    """A chunk scored against one query. Higher score = more relevant."""

    score: float


class IndexManifest(BaseModel):
    """Contents of meta.json."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str
    created_at: str
    doc_count: int = Field(ge=0)
    chunk_count: int = Field(ge=0)
