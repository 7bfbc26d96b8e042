"""Document parsing models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field as PydanticField

from formsense.typing.models.field import DetectedField

CandidateData = dict[str, Any]


class Page(BaseModel):
    """Text and geometry of one document page."""

    model_config = ConfigDict(extra="forbid")

    number: int
    width: float
    height: float
    text: str = ""


class DocumentMetadata(BaseModel):
    """Document information dictionary and page count."""

    model_config = ConfigDict(extra="forbid")

    page_count: int
    title: str | None = None
    author: str | None = None
    creator: str | None = None
    producer: str | None = None
    creation_date: datetime | None = None
    is_scanned: bool = False


class ParseResult(BaseModel):
    """Output of parsing one document."""

    model_config = ConfigDict(extra="forbid")

    pages: list[Page]
    fields: list[DetectedField]
    metadata: DocumentMetadata
    raw_text: str


class ExtractedEntities(BaseModel):
    """Entities found in free text, in first-occurrence order."""

    model_config = ConfigDict(extra="forbid")

    emails: list[str] = PydanticField(default_factory=list)
    phones: list[str] = PydanticField(default_factory=list)
    dates: list[str] = PydanticField(default_factory=list)
    addresses: list[str] = PydanticField(default_factory=list)


class LibraryDocument(BaseModel):
    """Reference document returned by a document library."""

    model_config = ConfigDict(extra="ignore")

    id: str
    structured_data: dict[str, Any] | None = None
    content: str | None = None
