"""Note schema, text normalization, and storage."""

from .normalize import CONTENT_TYPE_KEYWORDS, classify_content_type, normalize_text
from .schema import (
    ContentType,
    ExtractionResult,
    FormatResult,
    Note,
    NoteDraft,
    NoteStatus,
    NoteUpdate,
)
from .store import NoteStore

__all__ = [
    "CONTENT_TYPE_KEYWORDS",
    "ContentType",
    "ExtractionResult",
    "FormatResult",
    "Note",
    "NoteDraft",
    "NoteStatus",
    "NoteStore",
    "NoteUpdate",
    "classify_content_type",
    "normalize_text",
]
