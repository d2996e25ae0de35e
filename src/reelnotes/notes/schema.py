"""Pydantic models for notes and the transient pipeline payloads."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

UNTITLED = "Untitled Note"
MANUAL_ENTRY = "Manual Entry"
NULLABLE_COLUMNS = {"raw_transcript", "raw_ocr"}


class ContentType(str, Enum):
    """Closed set of note categories."""

    RECIPE = "Recipe"
    WORKOUT = "Workout"
    TRAVEL = "Travel"
    EDUCATIONAL = "Educational"
    DIY = "DIY"
    OTHER = "Other"
    UNSPECIFIED = "Unspecified"


class NoteStatus(str, Enum):
    DRAFT = "draft"
    READY = "ready"


class NoteDraft(BaseModel):
    """A note that has not been stored yet (no id, no timestamps)."""

    url: str = MANUAL_ENTRY
    title: str = UNTITLED
    content_type: ContentType = ContentType.UNSPECIFIED
    structured_text: str = ""
    raw_transcript: Optional[str] = None
    raw_ocr: Optional[str] = None
    status: NoteStatus = NoteStatus.DRAFT

    @field_validator("title", mode="before")
    @classmethod
    def title_not_empty(cls, v: Optional[str]) -> str:
        if v is None or not str(v).strip():
            return UNTITLED
        return v

    @field_validator("structured_text", mode="before")
    @classmethod
    def text_not_null(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class Note(NoteDraft):
    """A stored note row."""

    id: int
    created_at: datetime
    updated_at: datetime


class NoteUpdate(BaseModel):
    """Partial update; only explicitly set fields are written."""

    model_config = ConfigDict(extra="forbid")

    url: Optional[str] = None
    title: Optional[str] = None
    content_type: Optional[ContentType] = None
    structured_text: Optional[str] = None
    raw_transcript: Optional[str] = None
    raw_ocr: Optional[str] = None
    status: Optional[NoteStatus] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return UNTITLED
        return v

    def to_columns(self) -> dict:
        """Column/value pairs for the fields the caller actually set."""
        columns = {}
        for name in sorted(self.model_fields_set):
            value = getattr(self, name)
            if name == "structured_text" and value is None:
                value = ""
            elif value is None and name not in NULLABLE_COLUMNS:
                continue
            if isinstance(value, Enum):
                value = value.value
            columns[name] = value
        return columns


class ExtractionResult(BaseModel):
    """Output of the content extraction service."""

    transcript: Optional[str] = None
    ocr: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def error_excludes_content(self) -> "ExtractionResult":
        if self.error:
            self.transcript = None
            self.ocr = None
        return self

    @property
    def content(self) -> str:
        """Transcript if present, else OCR text, else empty."""
        return self.transcript or self.ocr or ""

    @property
    def is_empty(self) -> bool:
        """True when extraction succeeded but found nothing."""
        return not self.error and not self.content


class FormatResult(BaseModel):
    """Output of the note formatter."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    content_type: ContentType = Field(alias="contentType")
    structured_text: str = Field(alias="structuredText")
