"""Capture pipeline: extract -> format -> note."""

import logging
from datetime import datetime
from typing import Optional

from ..config import Settings
from ..exceptions import ExtractionError, InvalidReelURLError, NoContentError
from ..llm import CompletionClient, NoteFormatter
from ..notes.schema import MANUAL_ENTRY, UNTITLED, ContentType, Note, NoteDraft, NoteStatus
from ..notes.store import NoteStore
from .extractor import ReelExtractor, extract_reel_id

logger = logging.getLogger(__name__)


class NotePipeline:
    """Orchestrates reel capture and note persistence."""

    def __init__(
        self,
        settings: Settings,
        extractor: Optional[ReelExtractor] = None,
        formatter: Optional[NoteFormatter] = None,
        store: Optional[NoteStore] = None,
    ):
        self.settings = settings
        self.extractor = extractor or ReelExtractor(settings)
        self.formatter = formatter or NoteFormatter(CompletionClient(settings))
        self.store = store or NoteStore(settings.db_path)

    async def capture(self, url: str) -> NoteDraft:
        """Extract and format a reel into an unsaved note.

        Raises:
            InvalidReelURLError: If the URL is not an Instagram reel or post.
            ExtractionError: If the extraction service reported an error.
            NoContentError: If the reel has no caption or on-image text.
        """
        url = url.strip()
        if not extract_reel_id(url):
            raise InvalidReelURLError(f"Not an Instagram reel or post URL: {url}")

        logger.info(f"[PIPELINE] Capturing {url}")
        extracted = await self.extractor.extract(url)
        if extracted.error:
            logger.error(f"[PIPELINE] Extraction failed for {url}: {extracted.error}")
            self._log_error(url, extracted.error)
            raise ExtractionError(extracted.error)
        if extracted.is_empty:
            logger.warning(f"[PIPELINE] No content found for {url}")
            self._log_error(url, "no content found")
            raise NoContentError("Could not extract content from this reel")

        content = extracted.content
        formatted = await self.formatter.format_note(content)

        return NoteDraft(
            url=url,
            title=formatted.title,
            content_type=formatted.content_type,
            structured_text=formatted.structured_text,
            raw_transcript=content,
            raw_ocr=extracted.ocr,
            status=NoteStatus.READY,
        )

    async def save(self, draft: NoteDraft) -> Note:
        note_id = await self.store.insert(draft)
        note = await self.store.get_by_id(note_id)
        logger.info(f"[PIPELINE] Saved note {note_id}: '{note.title}'")
        return note

    async def capture_and_save(self, url: str) -> Note:
        return await self.save(await self.capture(url))

    async def create_manual(self, url: str = "") -> Note:
        """Create an empty draft note for the user to fill in."""
        draft = NoteDraft(
            url=url.strip() or MANUAL_ENTRY,
            title=UNTITLED,
            content_type=ContentType.OTHER,
            structured_text="",
            status=NoteStatus.DRAFT,
        )
        return await self.save(draft)

    def _log_error(self, url: str, error: str) -> None:
        """Append a failed capture to the error log."""
        try:
            self.settings.data_dir.mkdir(parents=True, exist_ok=True)
            with open(self.settings.error_log_path, "a", encoding="utf-8") as f:
                timestamp = datetime.now().isoformat()
                f.write(f"[{timestamp}] {url}: {error}\n")
        except OSError as e:
            logger.warning(f"[PIPELINE] Could not write {self.settings.error_log_path}: {e}")
