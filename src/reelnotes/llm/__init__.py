"""Completion client and note formatter."""

from .formatter import NoteFormatter, extract_json_payload, fallback_result
from .openai import CompletionClient

__all__ = ["CompletionClient", "NoteFormatter", "extract_json_payload", "fallback_result"]
