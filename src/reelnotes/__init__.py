"""ReelNotes - turn Instagram reels into structured, searchable notes."""

__version__ = "0.1.0"
