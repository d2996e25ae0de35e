"""SQLite note store."""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import aiosqlite

from .schema import ContentType, Note, NoteDraft, NoteUpdate

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    url TEXT NOT NULL,
    title TEXT NOT NULL,
    content_type TEXT NOT NULL DEFAULT 'Unspecified',
    structured_text TEXT NOT NULL DEFAULT '',
    raw_transcript TEXT,
    raw_ocr TEXT,
    status TEXT NOT NULL DEFAULT 'draft' CHECK (status IN ('draft', 'ready')),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_notes_created_at ON notes(created_at DESC);
CREATE INDEX IF NOT EXISTS idx_notes_content_type ON notes(content_type);
"""

ORDER_BY = "ORDER BY created_at DESC, id DESC"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


class NoteStore:
    """CRUD over note records, by id or free-text query."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._db: Optional[aiosqlite.Connection] = None

    async def init(self) -> None:
        """Create the database file and tables, then open a connection."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        db = await self._connection()
        await db.executescript(SCHEMA)
        await db.commit()
        logger.debug(f"[STORE] Initialized database at {self.db_path}")

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def __aenter__(self) -> "NoteStore":
        await self.init()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def _connection(self) -> aiosqlite.Connection:
        if self._db is None:
            self._db = await aiosqlite.connect(self.db_path)
            self._db.row_factory = aiosqlite.Row
            # SQLite's LIKE and lower() only fold ASCII
            await self._db.create_function("casefold", 1, _casefold, deterministic=True)
        return self._db

    async def _fetch_notes(self, sql: str, params: tuple = ()) -> list[Note]:
        db = await self._connection()
        cursor = await db.execute(sql, params)
        rows = await cursor.fetchall()
        return [Note(**dict(row)) for row in rows]

    async def get_all(self) -> list[Note]:
        """All notes, newest first."""
        return await self._fetch_notes(f"SELECT * FROM notes {ORDER_BY}")

    async def get_by_id(self, note_id: int) -> Note | None:
        db = await self._connection()
        cursor = await db.execute("SELECT * FROM notes WHERE id = ?", (note_id,))
        row = await cursor.fetchone()
        return Note(**dict(row)) if row else None

    async def search(self, query: str) -> list[Note]:
        """Case-insensitive substring match against title or structured text."""
        term = query.casefold()
        return await self._fetch_notes(
            "SELECT * FROM notes "
            "WHERE instr(casefold(title), ?) > 0 OR instr(casefold(structured_text), ?) > 0 "
            f"{ORDER_BY}",
            (term, term),
        )

    async def get_by_content_type(self, content_type: ContentType | str) -> list[Note]:
        value = ContentType(content_type).value
        return await self._fetch_notes(
            f"SELECT * FROM notes WHERE content_type = ? {ORDER_BY}",
            (value,),
        )

    async def insert(self, draft: NoteDraft) -> int:
        """Insert a note and return its id."""
        now = _now()
        db = await self._connection()
        cursor = await db.execute(
            """INSERT INTO notes (url, title, content_type, structured_text, raw_transcript,
                                  raw_ocr, status, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                draft.url,
                draft.title,
                draft.content_type.value,
                draft.structured_text,
                draft.raw_transcript,
                draft.raw_ocr,
                draft.status.value,
                now,
                now,
            ),
        )
        await db.commit()
        logger.info(f"[STORE] Inserted note {cursor.lastrowid}: '{draft.title}'")
        return cursor.lastrowid

    async def update(self, note_id: int, changes: Union[NoteUpdate, dict]) -> bool:
        """Apply a partial update and refresh updated_at.

        Returns True if the note exists.

        Raises:
            pydantic.ValidationError: If ``changes`` names an unknown or
                immutable field.
        """
        if not isinstance(changes, NoteUpdate):
            changes = NoteUpdate(**changes)
        columns = changes.to_columns()
        columns["updated_at"] = _now()

        assignments = ", ".join(f"{name} = ?" for name in columns)
        db = await self._connection()
        cursor = await db.execute(
            f"UPDATE notes SET {assignments} WHERE id = ?",
            (*columns.values(), note_id),
        )
        await db.commit()
        updated = cursor.rowcount > 0
        if updated:
            logger.info(f"[STORE] Updated note {note_id}: {sorted(columns)}")
        return updated

    async def delete(self, note_id: int) -> bool:
        """Delete a note. Returns True if it existed."""
        db = await self._connection()
        cursor = await db.execute("DELETE FROM notes WHERE id = ?", (note_id,))
        await db.commit()
        deleted = cursor.rowcount > 0
        if deleted:
            logger.info(f"[STORE] Deleted note {note_id}")
        return deleted
