"""Flatten untrusted JSON-shaped values into display text.

Both the extraction service and the completion service hand back JSON whose
shape is not guaranteed: a field that should be a string may arrive as a
list of bullet points, a ``{"section": ..., "content": ...}`` pair, an object
holding ``sections``, or an arbitrary nested object. ``normalize_text`` folds
all of these into one string and never raises, so callers can rely on always
getting something renderable back.
"""

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .schema import ContentType

BULLET = "- "

# Ordered: the first keyword found in the text wins.
CONTENT_TYPE_KEYWORDS: tuple[tuple[str, ContentType], ...] = (
    ("recipe", ContentType.RECIPE),
    ("workout", ContentType.WORKOUT),
    ("travel", ContentType.TRAVEL),
    ("educational", ContentType.EDUCATIONAL),
    ("diy", ContentType.DIY),
)


class Shape(Enum):
    """Runtime shape of a value, in dispatch priority order."""

    STRING = "string"
    NULL = "null"
    SEQUENCE = "sequence"
    SECTION = "section"
    SECTIONS = "sections"
    MAPPING = "mapping"
    SCALAR = "scalar"


def shape_of(value: Any) -> Shape:
    """Classify a value into one of the closed set of shapes."""
    if isinstance(value, str):
        return Shape.STRING
    if value is None:
        return Shape.NULL
    if isinstance(value, (list, tuple)):
        return Shape.SEQUENCE
    if isinstance(value, Mapping):
        if "section" in value or "content" in value:
            return Shape.SECTION
        if isinstance(value.get("sections"), (list, tuple)):
            return Shape.SECTIONS
        return Shape.MAPPING
    return Shape.SCALAR


def normalize_text(value: Any, fallback: str = "", json_objects: bool = False) -> str:
    """Convert a value of unknown shape into a single display string.

    Args:
        value: Anything decoded from JSON (or a plain Python equivalent).
        fallback: Returned whenever the value carries no displayable text.
        json_objects: Render generic objects as pretty-printed JSON instead of
            ``key``/``value`` blocks. Legacy behaviour, off by default.

    Returns:
        The flattened text, or ``fallback``.
    """
    match shape_of(value):
        case Shape.STRING:
            trimmed = value.strip()
            return trimmed if trimmed else fallback
        case Shape.NULL:
            return fallback
        case Shape.SEQUENCE:
            return _join_items(value, fallback, json_objects)
        case Shape.SECTION:
            parts = [
                normalize_text(value.get("section"), "", json_objects),
                normalize_text(value.get("content"), "", json_objects),
            ]
            combined = "\n".join(part for part in parts if part)
            return combined if combined else fallback
        case Shape.SECTIONS:
            return _join_items(value["sections"], fallback, json_objects)
        case Shape.MAPPING:
            if json_objects:
                return _dump_json(value, fallback)
            return _join_blocks(value, fallback)
        case Shape.SCALAR:
            return _scalar_text(value)


def _join_items(items, fallback: str, json_objects: bool) -> str:
    """Normalize each item and join the non-empty ones as a bullet list."""
    lines = [normalize_text(item, "", json_objects) for item in items]
    lines = [line for line in lines if line]
    if not lines:
        return fallback
    return "\n".join(line if line.startswith(BULLET) else f"{BULLET}{line}" for line in lines)


def _join_blocks(record: Mapping, fallback: str) -> str:
    """Render each non-empty entry as a ``key``/``value`` block."""
    blocks = []
    for key, val in record.items():
        formatted = normalize_text(val, "")
        if formatted:
            blocks.append(f"{key}\n{formatted}")
    return "\n\n".join(blocks) if blocks else fallback


def _dump_json(record: Mapping, fallback: str) -> str:
    try:
        return json.dumps(record, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return fallback


def _scalar_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def classify_content_type(value: Any) -> ContentType:
    """Map free-form category text onto the closed ``ContentType`` set."""
    text = normalize_text(value, ContentType.OTHER.value).lower()
    for keyword, content_type in CONTENT_TYPE_KEYWORDS:
        if keyword in text:
            return content_type
    return ContentType.OTHER
