"""Turn a raw reel transcript into a titled, categorized, structured note."""

import json
import logging
import re
from typing import Any, Protocol

from ..notes.normalize import classify_content_type, normalize_text
from ..notes.schema import UNTITLED, ContentType, FormatResult
from .prompts import build_format_prompt

logger = logging.getLogger(__name__)

FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
BARE_OBJECT = re.compile(r"\{[\s\S]*\}")
TITLE_MAX_CHARS = 50
BODY_KEYS = ("structuredText", "sections", "content")


class CompletionService(Protocol):
    async def complete(self, prompt: str) -> str: ...


def extract_json_payload(text: str) -> dict:
    """Pull the JSON object out of a free-form completion reply.

    Tries a fenced ```json block first, then the outermost ``{...}`` span,
    then the whole text.

    Raises:
        ValueError: If no JSON object can be decoded.
    """
    match = FENCED_JSON.search(text)
    if match:
        candidate = match.group(1)
    else:
        match = BARE_OBJECT.search(text)
        candidate = match.group(0) if match else text

    payload = json.loads(candidate)
    if not isinstance(payload, dict):
        raise ValueError(f"Expected a JSON object, got {type(payload).__name__}")
    return payload


def result_from_payload(payload: dict, transcript: str) -> FormatResult:
    """Map a decoded reply onto a FormatResult."""
    body: Any = payload
    for key in BODY_KEYS:
        if payload.get(key) is not None:
            body = payload[key]
            break

    return FormatResult(
        title=normalize_text(payload.get("title"), UNTITLED),
        content_type=classify_content_type(payload.get("contentType")),
        structured_text=normalize_text(body, transcript),
    )


def fallback_result(transcript: str) -> FormatResult:
    """Deterministic result used whenever formatting fails."""
    first_line = transcript.split("\n")[0][:TITLE_MAX_CHARS]
    return FormatResult(
        title=normalize_text(first_line, UNTITLED),
        content_type=ContentType.OTHER,
        structured_text=normalize_text(transcript, ""),
    )


class NoteFormatter:
    """Formats transcripts with one completion call and never raises."""

    def __init__(self, completion: CompletionService):
        self.completion = completion

    async def format_note(self, transcript: str) -> FormatResult:
        logger.info(f"[FORMATTER] Formatting transcript ({len(transcript)} chars)")
        try:
            reply = await self.completion.complete(build_format_prompt(transcript))
            payload = extract_json_payload(reply)
            result = result_from_payload(payload, transcript)
        except Exception as e:
            logger.warning(f"[FORMATTER] Falling back to raw transcript: {type(e).__name__}: {e}")
            return fallback_result(transcript)

        logger.info(f"[FORMATTER] Formatted note: '{result.title}' [{result.content_type.value}]")
        return result
