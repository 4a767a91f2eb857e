"""
KPI Portal - command line entry point
"""

import asyncio
import sys
from pathlib import Path

import click

from .database.manager import DatabaseManager
from .database.repos import TableStore
from .notifications import BrowserNavigator, NotificationManager, NotificationSummary, StaticSession
from .provisioning import SetupSummary, run_setup
from .utils.logger import setup_logging

db_path_option = click.option(
    "--db-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="DuckDB file (defaults to DB_PATH)",
)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level):
    """KPI Portal - database provisioning and notification tools"""
    setup_logging(log_level)


@cli.command("setup-db")
@db_path_option
@click.option("--timeout", type=float, default=None, help="Seconds allowed per data store call")
def setup_db(db_path, timeout):
    """Check the schema and make sure the default company exists"""
    click.echo("Starting database setup...")

    try:
        store = TableStore(DatabaseManager(db_path))
        results = run_setup(store, call_timeout=timeout)
    except Exception as e:
        click.echo(f"Database setup failed: {e}")
        sys.exit(1)

    click.echo("")
    for result in results:
        status = "OK     " if result.exists else "MISSING"
        click.echo(f"  [{status}] {result.name}")
        if result.error:
            click.echo(f"            Error: {result.error}")

    summary = SetupSummary.from_results(results)
    click.echo("")
    for line in summary.format_lines():
        click.echo(line)

    sys.exit(0 if summary.ok else 1)


@cli.command()
@db_path_option
def migrate(db_path):
    """Apply the database schema"""
    try:
        db_manager = DatabaseManager(db_path)
        applied = db_manager.migrate()
    except Exception as e:
        click.echo(f"Failed to apply schema: {e}")
        sys.exit(1)

    click.echo(f"Applied {applied} migration(s) to {db_manager.db_path}")
    click.echo("\nDatabase Status:")
    for table, count in db_manager.table_counts().items():
        click.echo(f"  {table}: {'missing' if count is None else count}")


@cli.command()
@db_path_option
@click.option("--user", "user_id", required=True, help="Employee id whose notifications to show")
@click.option("--open", "open_id", type=int, default=None, help="Select a notification by id")
def notifications(db_path, user_id, open_id):
    """Show a user's recent notifications"""
    manager = NotificationManager(DatabaseManager(db_path))
    summary = NotificationSummary(manager, StaticSession(user_id), BrowserNavigator())

    try:
        state = summary.state
    except Exception as e:
        click.echo(f"Failed to load notifications: {e}")
        sys.exit(1)

    if open_id is not None:
        target = next((n for n in state.visible if n.id == open_id), None)
        if target is None:
            click.echo(f"Notification {open_id} not found for {user_id}")
            sys.exit(1)

        async def _select():
            handle = summary.select(target)
            if handle is not None:
                await handle

        asyncio.run(_select())
        click.echo(f"Opened notification {open_id}")
        return

    card = summary.render()
    click.echo(f"\n{card.title}")
    click.echo(card.description + (f"  [{card.badge}]" if card.badge else ""))
    click.echo("-" * 50)
    if card.is_empty:
        click.echo("No notifications")
        return

    for item in card.items:
        marker = "*" if item.unread else " "
        click.echo(f"{marker} #{item.id} [{item.priority}] {item.title}  ({item.timestamp})")
        if item.message:
            click.echo(f"    {item.message}")
        for detail in item.details:
            click.echo(f"    {detail}")
        if item.action:
            click.echo(f"    -> {item.action}")


if __name__ == "__main__":
    cli()
