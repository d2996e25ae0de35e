"""Shared pytest fixtures for ReelNotes tests."""

import json
import logging
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from reelnotes.config import Settings
from reelnotes.logging_config import NOISY_LOGGERS
from reelnotes.notes.schema import ContentType, NoteDraft, NoteStatus
from reelnotes.notes.store import NoteStore


@pytest.fixture(autouse=True)
def restore_root_logger(monkeypatch):
    """Keep setup_colored_logging from leaking root logger changes across tests."""
    root = logging.getLogger()
    monkeypatch.setattr(root, "handlers", [])
    levels = {name: logging.getLogger(name).level for name in (None, *NOISY_LOGGERS)}
    yield root
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Temporary data directory for the database and error log."""
    return tmp_path / ".reelnotes"


@pytest.fixture
def settings(data_dir: Path, monkeypatch) -> Settings:
    """Create settings with a temporary data directory."""
    monkeypatch.setenv("GROQ_API_KEY", "test-api-key")
    monkeypatch.delenv("RAPID_API_KEY", raising=False)
    return Settings(
        data_dir=data_dir,
        llm_api_key="test-api-key",
    )


@pytest_asyncio.fixture
async def store(settings: Settings):
    """Initialized note store backed by a temporary database."""
    note_store = NoteStore(settings.db_path)
    await note_store.init()
    yield note_store
    await note_store.close()


@pytest.fixture
def sample_draft() -> NoteDraft:
    """A formatted, ready-to-save note."""
    return NoteDraft(
        url="https://www.instagram.com/reel/ABC123/",
        title="Pasta Bake",
        content_type=ContentType.RECIPE,
        structured_text="🍝 Ingredients\n- pasta\n- cheese",
        raw_transcript="Pasta bake! pasta, cheese, bake 20 min",
        status=NoteStatus.READY,
    )


@pytest.fixture
def sample_transcript() -> str:
    return "Pasta night\nBoil water, add pasta, stir in sauce."


@pytest.fixture
def sample_llm_reply() -> str:
    """A typical completion reply wrapped in a fenced json block."""
    payload = {
        "title": "Pasta Bake",
        "contentType": "Recipe",
        "structuredText": "🍝 Ingredients...",
    }
    return f"Here is your note:\n```json\n{json.dumps(payload, ensure_ascii=False)}\n```"


@pytest.fixture
def mock_completion():
    """Completion service double with an async ``complete``."""
    mock = MagicMock()
    mock.complete = AsyncMock()
    return mock
