"""url-filters CLI using Typer.

Commands:
- init-db: Create the forum schema
- list: List latest topics narrowed by URL filter options
- filters: Show the registered filters
"""

import sqlite3
from pathlib import Path
from typing import Annotated, Optional

import typer

from .config import get_settings
from .filters import default_registry
from .listing import TopicLister
from .logging import configure_logging, get_logger
from .store import ForumStore

app = typer.Typer(
    name="url-filters",
    help="Filter forum topic listings with URL query parameters.",
    add_completion=False,
)

logger = get_logger(__name__)

DbOption = Annotated[
    Optional[Path], typer.Option("--db", help="SQLite forum database (defaults to settings)")
]


@app.callback()
def setup(
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR); defaults to settings"),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help="Log format (console, json); defaults to settings"),
    ] = None,
) -> None:
    """Filter forum topic listings with URL query parameters."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        format=log_format or settings.log_format,
    )


@app.command("init-db")
def init_db(db: DbOption = None) -> None:
    """Create the forum tables if they do not exist."""
    path = db or get_settings().database_path
    try:
        ForumStore(path)
    except sqlite3.Error as e:
        logger.error("init_db_failed", path=str(path), error=str(e))
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    logger.info("database_ready", path=str(path))
    typer.echo(f"Database ready: {path}")


@app.command("list")
def list_topics(
    after: Annotated[Optional[str], typer.Option(help="Created within the last N days")] = None,
    after_date: Annotated[Optional[str], typer.Option(help="Created after YYYY-MM-DD")] = None,
    before_date: Annotated[Optional[str], typer.Option(help="Created before YYYY-MM-DD")] = None,
    categories: Annotated[Optional[str], typer.Option(help="Category slugs, comma-separated")] = None,
    exclude_categories: Annotated[
        Optional[str], typer.Option(help="Category slugs to exclude, comma-separated")
    ] = None,
    include_tags: Annotated[Optional[str], typer.Option(help="Tag names, comma-separated")] = None,
    exclude_tags: Annotated[Optional[str], typer.Option(help="Tag names to exclude, comma-separated")] = None,
    topic_author: Annotated[Optional[str], typer.Option(help="Group that started the topic")] = None,
    reply_from: Annotated[Optional[str], typer.Option(help="Group that replied")] = None,
    no_reply_from: Annotated[Optional[str], typer.Option(help="Group that did not reply")] = None,
    page: Annotated[int, typer.Option(help="Zero-based page number")] = 0,
    db: DbOption = None,
    output_json: Annotated[bool, typer.Option("--json", help="Print the listing as JSON")] = False,
) -> None:
    """List latest topics, narrowed by the given filters.

    Example:
        url-filters list --after-date 2024-01-01 --categories support,dev \\
            --reply-from staff
    """
    params = {
        "after": after,
        "after_date": after_date,
        "before_date": before_date,
        "categories": categories,
        "exclude_categories": exclude_categories,
        "include_tags": include_tags,
        "exclude_tags": exclude_tags,
        "topic_author": topic_author,
        "reply_from": reply_from,
        "no_reply_from": no_reply_from,
    }

    settings = get_settings()
    try:
        lister = TopicLister(store=ForumStore(db or settings.database_path), settings=settings)
        result = lister.list_topics(params, page=page)
    except sqlite3.Error as e:
        logger.exception("listing_failed", error=str(e))
        typer.echo(f"Error: listing failed - {e}", err=True)
        raise typer.Exit(1)

    if output_json:
        typer.echo(result.model_dump_json(indent=2))
        return

    if result.filters_applied:
        typer.echo(f"Filters: {', '.join(result.filters_applied)}")
    typer.echo(f"Topics: {result.total} (page {result.page}, {len(result.topics)} shown)")
    typer.echo()
    for topic in result.topics:
        typer.echo(f"{topic.id:>6}  {topic.created_at:%Y-%m-%d}  {topic.title}")


@app.command("filters")
def show_filters() -> None:
    """Show the registered filters in the order they run."""
    for topic_filter in default_registry():
        typer.echo(f"{topic_filter.name:<20} {topic_filter.description}")


def main() -> None:
    """CLI entry point."""
    app()
