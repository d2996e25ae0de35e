"""ReelNotes CLI."""

import asyncio
import json
import sys

import click

from .config import get_settings
from .exceptions import ReelNotesError
from .logging_config import setup_colored_logging
from .notes.schema import ContentType, Note, NoteStatus, NoteUpdate

CONTENT_TYPES = [content_type.value for content_type in ContentType]
STATUSES = [status.value for status in NoteStatus]


def _load_settings():
    try:
        return get_settings()
    except Exception as e:
        click.echo(f"Error loading settings: {e}", err=True)
        click.echo("Make sure .env file exists with GROQ_API_KEY", err=True)
        sys.exit(1)


def _open_pipeline(settings):
    """Build a pipeline whose store is opened by the caller."""
    from .engine import NotePipeline
    from .notes.store import NoteStore

    return NotePipeline(settings, store=NoteStore(settings.db_path))


def _echo_summary(note: Note) -> None:
    created = note.created_at.strftime("%Y-%m-%d %H:%M")
    click.echo(f"  [{note.id}] {note.title}  ({note.content_type.value}, {note.status.value}, {created})")


def _echo_note(note: Note) -> None:
    click.echo(f"# {note.title}")
    click.echo(f"Type:    {note.content_type.value}")
    click.echo(f"Status:  {note.status.value}")
    click.echo(f"Source:  {note.url}")
    click.echo(f"Updated: {note.updated_at.isoformat()}")
    click.echo("")
    click.echo(note.structured_text or "(empty)")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, verbose):
    """ReelNotes - turn Instagram reels into structured, searchable notes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_colored_logging(verbose)


@cli.command()
@click.argument("url")
@click.option("--dry-run", is_flag=True, help="Show the formatted note without saving it")
def add(url, dry_run):
    """Extract a reel, format it, and save it as a note."""
    settings = _load_settings()
    pipeline = _open_pipeline(settings)

    async def run():
        async with pipeline.store:
            draft = await pipeline.capture(url)
            if dry_run:
                click.echo(f"# {draft.title}  ({draft.content_type.value})")
                click.echo("")
                click.echo(draft.structured_text)
                return
            note = await pipeline.save(draft)
            click.echo(f"Saved note {note.id}: {note.title} ({note.content_type.value})")

    try:
        asyncio.run(run())
    except ReelNotesError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument("url", required=False, default="")
def manual(url):
    """Create an empty draft note, optionally tied to a URL."""
    settings = _load_settings()
    pipeline = _open_pipeline(settings)

    async def run():
        async with pipeline.store:
            note = await pipeline.create_manual(url)
            click.echo(f"Created draft note {note.id} ({note.url})")

    asyncio.run(run())


@cli.command("list")
@click.option("--type", "content_type", type=click.Choice(CONTENT_TYPES), help="Only show this content type")
def list_notes(content_type):
    """List notes, newest first."""
    from .notes.store import NoteStore

    settings = _load_settings()

    async def run():
        async with NoteStore(settings.db_path) as store:
            if content_type:
                notes = await store.get_by_content_type(content_type)
            else:
                notes = await store.get_all()
        if not notes:
            click.echo("No notes yet.")
            return
        for note in notes:
            _echo_summary(note)

    asyncio.run(run())


@cli.command()
@click.argument("query")
def search(query):
    """Search note titles and bodies (case-insensitive)."""
    from .notes.store import NoteStore

    settings = _load_settings()

    async def run():
        async with NoteStore(settings.db_path) as store:
            notes = await store.search(query)
        if not notes:
            click.echo(f"No notes match '{query}'.")
            return
        click.echo(f"{len(notes)} note(s) match '{query}':")
        for note in notes:
            _echo_summary(note)

    asyncio.run(run())


@cli.command()
@click.argument("note_id", type=int)
def show(note_id):
    """Show a single note."""
    from .notes.store import NoteStore

    settings = _load_settings()

    async def run():
        async with NoteStore(settings.db_path) as store:
            return await store.get_by_id(note_id)

    note = asyncio.run(run())
    if note is None:
        click.echo(f"Note {note_id} not found", err=True)
        sys.exit(1)
    _echo_note(note)


@cli.command()
@click.argument("note_id", type=int)
@click.option("--title", help="New title")
@click.option("--type", "content_type", type=click.Choice(CONTENT_TYPES), help="New content type")
@click.option("--text", help="New structured text")
@click.option("--status", type=click.Choice(STATUSES), help="New status")
def edit(note_id, title, content_type, text, status):
    """Edit fields of an existing note."""
    from .notes.store import NoteStore

    changes = {
        "title": title,
        "content_type": content_type,
        "structured_text": text,
        "status": status,
    }
    changes = {name: value for name, value in changes.items() if value is not None}
    if not changes:
        click.echo("Nothing to change.", err=True)
        sys.exit(1)

    settings = _load_settings()

    async def run():
        async with NoteStore(settings.db_path) as store:
            return await store.update(note_id, NoteUpdate(**changes))

    if not asyncio.run(run()):
        click.echo(f"Note {note_id} not found", err=True)
        sys.exit(1)
    click.echo(f"Updated note {note_id}: {', '.join(sorted(changes))}")


@cli.command()
@click.argument("note_id", type=int)
@click.confirmation_option(prompt="Delete this note?")
def delete(note_id):
    """Delete a note."""
    from .notes.store import NoteStore

    settings = _load_settings()

    async def run():
        async with NoteStore(settings.db_path) as store:
            return await store.delete(note_id)

    if not asyncio.run(run()):
        click.echo(f"Note {note_id} not found", err=True)
        sys.exit(1)
    click.echo(f"Deleted note {note_id}")


@cli.command("format")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
def format_text(source):
    """Format raw caption text (file or stdin) without saving it."""
    from .llm import CompletionClient, NoteFormatter

    settings = _load_settings()
    transcript = source.read()
    formatter = NoteFormatter(CompletionClient(settings))

    result = asyncio.run(formatter.format_note(transcript))
    click.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))


def main():
    cli()


if __name__ == "__main__":
    main()
