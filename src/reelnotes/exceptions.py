"""Custom exceptions for ReelNotes."""


class ReelNotesError(Exception):
    """Base exception for ReelNotes."""


class InvalidReelURLError(ReelNotesError):
    """Raised when a URL does not point at an Instagram reel or post."""


class ExtractionError(ReelNotesError):
    """Raised when the extraction service reports an error."""


class NoContentError(ReelNotesError):
    """Raised when extraction succeeded but found no caption or OCR text."""


class CompletionError(ReelNotesError):
    """Raised when the completion service returns an unusable reply."""


class NoteNotFoundError(ReelNotesError):
    """Raised when a note id does not exist in the store."""
