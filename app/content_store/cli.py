#!/usr/bin/env python3
"""CLI commands for content store."""

import asyncio
import json

import click

from app.content_store.backup import BackupData, export_content, import_content
from app.content_store.config import get_content_repository
from app.content_store.exceptions import ContentStoreError
from app.content_store.locale import resolve
from app.content_store.models import ContentType
from app.content_store.session import ContentSession


def _preview(text: str, width: int = 60) -> str:
    text = text.replace("\n", " ")
    return text if len(text) <= width else text[: width - 3] + "..."


@click.group()
def cli():
    """Content store management commands."""
    pass


@cli.command("list")
@click.option("--page", default=None, help="Only entries grouped under this page")
@click.option("--all", "show_all", is_flag=True, help="Include hidden entries")
@click.option("--lang", default="es", show_default=True, help="Language to show")
def list_content(page, show_all, lang):
    """List stored content entries."""
    repository = get_content_repository()
    try:
        entries = asyncio.run(repository.list(page=page))
    except ContentStoreError as e:
        raise click.ClickException(str(e))

    shown = [entry for entry in entries if show_all or entry.visible]
    if not shown:
        click.echo("No content found")
        return

    for entry in shown:
        flags = "" if entry.visible else " [hidden]"
        group = f" ({entry.page})" if entry.page else ""
        value = resolve(entry.value, lang, "")
        click.echo(f"{entry.id} <{entry.type.value}>{group}{flags}: {_preview(value)}")


@cli.command()
@click.argument("key")
@click.option("--lang", default="es", show_default=True, help="Language to resolve")
@click.option("--default", "default", default="", help="Value when nothing is stored")
def get(key, lang, default):
    """Show the resolved value of a content key."""
    repository = get_content_repository()

    async def _get() -> str:
        async with ContentSession(repository, language=lang) as session:
            value = await session.coordinator.fetch(key, default)
            return resolve(value, lang, default)

    click.echo(asyncio.run(_get()))


@cli.command("set")
@click.argument("key")
@click.argument("value")
@click.option("--lang", default=None, help="Edit only this language of the value")
@click.option(
    "--type",
    "content_type",
    type=click.Choice([t.value for t in ContentType]),
    default=None,
    help="Store as text or media URL",
)
@click.option("--page", default=None, help="Page the entry is grouped under")
@click.option("--hidden/--visible", default=None, help="Hide from public listings")
def set_content(key, value, lang, content_type, page, hidden):
    """Write a content value (merged with what is stored)."""
    repository = get_content_repository()

    async def _set() -> None:
        async with ContentSession(repository, is_admin=True) as session:
            await session.edit_content(
                key,
                value,
                lang=lang,
                content_type=ContentType(content_type) if content_type else None,
                visible=None if hidden is None else not hidden,
                page=page,
            )

    try:
        asyncio.run(_set())
    except (ContentStoreError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Saved {key}")


@cli.command()
@click.option("--output", "-o", default=None, help="Output file path (default stdout)")
def export(output):
    """Export all content as a JSON backup."""
    repository = get_content_repository()
    try:
        backup = asyncio.run(export_content(repository))
    except ContentStoreError as e:
        raise click.ClickException(str(e))

    payload = backup.model_dump_json(indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(payload)
        click.echo(f"Exported {len(backup.content)} entries to {output}")
    else:
        click.echo(payload)


@cli.command("import")
@click.argument("backup_file", type=click.File("r", encoding="utf-8"))
def import_(backup_file):
    """Import content from a JSON backup (merging into stored entries)."""
    repository = get_content_repository()
    try:
        backup = BackupData.model_validate(json.load(backup_file))
        entries = asyncio.run(import_content(repository, backup))
    except (ContentStoreError, ValueError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Imported {len(entries)} entries")


if __name__ == "__main__":
    cli()
