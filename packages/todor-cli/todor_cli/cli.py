"""
todor command line interface.

Each command opens the configured database, makes sure the schema is
current, calls into the core services, and prints a rendered table.
"""

import asyncio
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv

from todor.config import load_config
from todor.db import create_adapter, initialize_schema
from todor.db.migrations import applied_migrations
from todor.display import render
from todor.errors import NotFound, TodoError
from todor.services import SearchService, TodoService

logger = logging.getLogger(__name__)


async def _run_with_adapter(adapter, action):
    await adapter.connect()
    try:
        await initialize_schema(adapter)
        return await action(adapter)
    finally:
        await adapter.close()


def run(ctx: click.Context, action):
    """Run an async action against a fresh adapter, mapping errors to exit codes."""
    try:
        adapter = create_adapter(ctx.obj["config"])
    except (ValueError, RuntimeError) as e:
        raise click.ClickException(str(e))

    try:
        return asyncio.run(_run_with_adapter(adapter, action))
    except NotFound as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(2)
    except TodoError as e:
        logger.debug("Command failed", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def show(ctx: click.Context, records) -> None:
    click.echo(render(records, text_width=ctx.obj["config"].display.text_width), nl=False)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: ~/.todor/config.yaml)",
)
@click.pass_context
def cli(ctx, verbose, config_path):
    """Versioned todo notes."""
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=log_level)

    try:
        config = load_config(config_path)
    except ValueError as e:
        raise click.ClickException(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("init")
@click.pass_context
def init_(ctx):
    """Create or upgrade the database schema."""

    # run() has already migrated by the time the action executes
    versions = run(ctx, applied_migrations)
    click.echo(f"Schema ready: {', '.join(versions) or 'no migrations'}")


@cli.command("new")
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def new(ctx, text):
    """Create a todo."""

    async def action(adapter):
        return await TodoService(adapter=adapter).create(" ".join(text))

    record = run(ctx, action)
    click.echo(record.id)


@cli.command("list")
@click.pass_context
def list_(ctx):
    """Show every todo, including replaced and archived ones."""

    async def action(adapter):
        return await TodoService(adapter=adapter).list()

    show(ctx, run(ctx, action))


@cli.command("complete")
@click.argument("todo_id")
@click.argument("completed", type=click.BOOL, required=False, default=True)
@click.pass_context
def complete(ctx, todo_id, completed):
    """Mark a todo done (or not done with COMPLETED=false)."""

    async def action(adapter):
        return await TodoService(adapter=adapter).complete(todo_id, completed)

    show(ctx, [run(ctx, action)])


@cli.command("search")
@click.argument("search_string")
@click.argument("max_results", type=click.IntRange(min=0), required=False)
@click.pass_context
def search(ctx, search_string, max_results):
    """Show todos whose full record contains SEARCH_STRING."""

    async def action(adapter):
        return await SearchService(adapter=adapter).search(search_string, max_results)

    show(ctx, run(ctx, action))


@cli.command("edit")
@click.argument("todo_id")
@click.argument("text", nargs=-1, required=True)
@click.pass_context
def edit(ctx, todo_id, text):
    """Replace a todo with a new version carrying TEXT."""

    async def action(adapter):
        return await TodoService(adapter=adapter).edit(todo_id, " ".join(text))

    record = run(ctx, action)
    click.echo(record.id)


@cli.command("archive")
@click.argument("todo_id")
@click.pass_context
def archive(ctx, todo_id):
    """Retire a todo without a replacement."""

    async def action(adapter):
        return await TodoService(adapter=adapter).archive(todo_id)

    show(ctx, [run(ctx, action)])


@cli.command("history")
@click.argument("todo_id")
@click.pass_context
def history(ctx, todo_id):
    """Show a todo and every later version of it."""

    async def action(adapter):
        return await TodoService(adapter=adapter).lineage(todo_id)

    show(ctx, run(ctx, action))


def main():
    """Main entry point for the todor command."""
    load_dotenv()
    cli(obj={})


if __name__ == "__main__":
    main()
