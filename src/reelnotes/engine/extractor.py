"""Caption and on-image text extraction for Instagram reels."""

import json
import logging
import re
from typing import Any, Optional

import httpx

from ..config import Settings
from ..notes.schema import ExtractionResult

logger = logging.getLogger(__name__)

REEL_URL_PATTERNS = [
    re.compile(r"instagram\.com/reel/([A-Za-z0-9_-]+)"),
    re.compile(r"instagram\.com/p/([A-Za-z0-9_-]+)"),
    re.compile(r"instagram\.com/tv/([A-Za-z0-9_-]+)"),
]

# Where each scraper response layout keeps the caption, most specific first.
CAPTION_PATHS: list[tuple] = [
    ("media", 0, "caption"),
    ("caption",),
    ("caption", "text"),
    ("description",),
    ("title",),
    ("text",),
    ("edge_media_to_caption", "edges", 0, "node", "text"),
    ("items", 0, "caption", "text"),
    ("graphql", "shortcode_media", "edge_media_to_caption", "edges", 0, "node", "text"),
]
OCR_PATHS: list[tuple] = [
    ("accessibility_caption",),
    ("alt_text",),
]


def extract_reel_id(url: str) -> Optional[str]:
    """Return the reel/post shortcode from an Instagram URL, or None."""
    for pattern in REEL_URL_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def _dig(data: Any, path: tuple) -> Any:
    for step in path:
        if isinstance(step, int):
            if not isinstance(data, list) or len(data) <= step:
                return None
        elif not isinstance(data, dict):
            return None
        data = data[step] if isinstance(step, int) else data.get(step)
        if data is None:
            return None
    return data


def _first_text(data: Any, paths: list[tuple]) -> str:
    for path in paths:
        value = _dig(data, path)
        if isinstance(value, str) and value.strip():
            return value
    return ""


def caption_from_payload(data: Any) -> str:
    """Find the caption in a scraper response, whatever its layout."""
    return _first_text(data, CAPTION_PATHS)


def ocr_from_payload(data: Any) -> str:
    return _first_text(data, OCR_PATHS)


def _parse_json_body(response: httpx.Response) -> Any:
    """Decode a JSON body, returning None for HTML or malformed responses."""
    body = response.text
    if body.strip().startswith("<"):
        logger.warning("[EXTRACT] Received HTML instead of JSON")
        return None
    try:
        return json.loads(body)
    except json.JSONDecodeError as e:
        logger.warning(f"[EXTRACT] Failed to parse response as JSON: {e}")
        return None


class ReelExtractor:
    """Extracts caption/OCR text for a reel URL.

    Uses the RapidAPI Instagram scraper when a key is configured, then falls
    back to Instagram's public oEmbed endpoint, which only exposes the title.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    async def extract(self, url: str) -> ExtractionResult:
        reel_id = extract_reel_id(url)
        if not reel_id:
            return ExtractionResult(error="Invalid Instagram reel URL")

        logger.info(f"[EXTRACT] Extracting reel {reel_id}")
        transcript = ""
        ocr = ""
        try:
            async with httpx.AsyncClient(
                follow_redirects=True, timeout=self.settings.request_timeout
            ) as client:
                if self.settings.rapidapi_key:
                    transcript, ocr = await self._fetch_scraper(client, url)

                if not transcript and not ocr:
                    transcript = await self._fetch_oembed(client, reel_id)
        except Exception as e:
            logger.error(f"[EXTRACT] Extraction failed for {url}: {type(e).__name__}: {e}")
            return ExtractionResult(error=str(e) or "Extraction failed")

        if transcript:
            preview = transcript[:100].replace("\n", " ")
            logger.info(f"[EXTRACT] Found caption ({len(transcript)} chars): {preview}")
        else:
            logger.info(f"[EXTRACT] No caption found for reel {reel_id}")

        return ExtractionResult(transcript=transcript or None, ocr=ocr or None)

    async def _fetch_scraper(self, client: httpx.AsyncClient, url: str) -> tuple[str, str]:
        """Query the RapidAPI scraper. HTTP failures count as nothing found."""
        host = self.settings.rapidapi_host
        try:
            response = await client.get(
                f"https://{host}/get-post",
                params={"url": url},
                headers={
                    "x-rapidapi-key": self.settings.rapidapi_key,
                    "x-rapidapi-host": host,
                },
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(f"[EXTRACT] Scraper returned HTTP {e.response.status_code}")
            return "", ""
        except httpx.RequestError as e:
            logger.warning(f"[EXTRACT] Scraper request failed: {e}")
            return "", ""

        data = _parse_json_body(response)
        if data is None:
            return "", ""
        if isinstance(data, dict):
            logger.debug(f"[EXTRACT] Scraper response keys: {sorted(data)}")
        return caption_from_payload(data), ocr_from_payload(data)

    async def _fetch_oembed(self, client: httpx.AsyncClient, reel_id: str) -> str:
        logger.debug("[EXTRACT] Trying Instagram oEmbed fallback")
        try:
            response = await client.get(
                self.settings.oembed_url,
                params={"url": f"https://www.instagram.com/reel/{reel_id}/"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"[EXTRACT] oEmbed request failed: {e}")
            return ""

        data = _parse_json_body(response)
        if not isinstance(data, dict):
            return ""
        title = data.get("title")
        return title if isinstance(title, str) else ""
