"""
Command-line interface for science-sources.

Provides commands to run the API server, initialize the database, and
submit or moderate sources from the shell.

Usage:
    science-sources serve                      # Run the API server
    science-sources init-db                    # Initialize database
    science-sources health                     # Check service health
    science-sources list --status pending      # List sources
    science-sources submit NAME EMAIL CONTENT  # Submit a source
    science-sources publish ID                 # Publish a pending source
    science-sources trash ID                   # Trash a source
"""

import asyncio
import json
import sys

import click

from science_sources.config.settings import get_settings
from science_sources.observability.logging import setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """Science Sources - Submission and moderation workflow."""
    if debug:
        import os
        os.environ["LOG_LEVEL"] = "DEBUG"
        get_settings.cache_clear()

    setup_logging()


def _build_service(db):
    """Wire a SourcesService over an already-connected database."""
    from science_sources.mail.mailer import build_mailer
    from science_sources.sources.emails import SourceEmails
    from science_sources.sources.links import LinkBuilder
    from science_sources.sources.repository import SourcesRepository
    from science_sources.sources.service import SourcesService

    settings = get_settings()
    links = LinkBuilder(settings.site_url)
    emails = SourceEmails(
        mailer=build_mailer(settings.site_name),
        links=links,
        site_name=settings.site_name,
        admin_email=settings.admin_email,
    )
    return SourcesService(SourcesRepository(db), emails, links)


@main.command("init-db")
def init_db() -> None:
    """Initialize the database schema."""
    from science_sources.sources.repository import SourcesRepository
    from science_sources.storage.database import Database

    async def run():
        db = Database()
        await db.connect()

        try:
            repo = SourcesRepository(db)
            await repo.create_tables()
            click.echo("Database initialized successfully")
        finally:
            await db.close()

    asyncio.run(run())


@main.command()
def health() -> None:
    """Check health of all dependencies."""
    import structlog
    logger = structlog.get_logger()

    from science_sources.mail.config import MailConfig

    async def check():
        results: dict[str, bool] = {}

        # Check PostgreSQL
        try:
            from science_sources.storage.database import Database
            db = Database()
            await db.connect()
            results["postgres"] = await db.health_check()
            await db.close()
        except Exception as e:
            results["postgres"] = False
            logger.error("Postgres health check failed", error=str(e))

        settings = get_settings()
        results["mail_relay_configured"] = MailConfig().relay_configured
        results["admin_auth_configured"] = settings.admin_auth_configured

        click.echo("\nHealth Check Results:")
        click.echo("-" * 40)

        all_healthy = True
        for name, status in results.items():
            icon = "✓" if status else "✗"
            color = "green" if status else "red"
            click.echo(click.style(f"  {icon} {name}: {status}", fg=color))
            if name == "postgres" and not status:
                all_healthy = False

        click.echo("-" * 40)

        if all_healthy:
            click.echo(click.style("All core services healthy!", fg="green"))
            sys.exit(0)
        else:
            click.echo(click.style("Some services unhealthy!", fg="red"))
            sys.exit(1)

    asyncio.run(check())


@main.command()
@click.option("--host", default=None, help="API server host")
@click.option("--port", default=None, type=int, help="API server port")
@click.option("--reload", is_flag=True, help="Enable auto-reload (dev only)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port

    click.echo(f"Starting API server on {host}:{port}")
    click.echo(f"API docs available on http://localhost:{port}/docs")

    uvicorn.run(
        "science_sources.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level="info",
    )


@main.command("list")
@click.option(
    "--status",
    "status_filter",
    type=click.Choice(["draft", "pending", "published", "trashed"]),
    default=None,
    help="Only show sources with this status",
)
@click.option("--limit", default=50, help="Maximum sources to show")
@click.option("--json", "as_json", is_flag=True, help="Print one JSON object per source")
def list_sources(status_filter: str | None, limit: int, as_json: bool) -> None:
    """List sources, newest first."""
    from science_sources.storage.database import Database

    async def run():
        db = Database()
        await db.connect()

        try:
            service = _build_service(db)
            records, total = await service.list_sources(
                status=status_filter, limit=limit,
            )

            if as_json:
                for record in records:
                    click.echo(json.dumps(record.to_dict()))
                return

            if not records:
                click.echo("No sources found.")
                return

            click.echo(f"\n{'ID':>6}  {'Status':<28}  Name")
            click.echo("-" * 60)
            for record in records:
                click.echo(f"{record.id:>6}  {record.status_label:<28}  {record.name}")
            click.echo("-" * 60)
            click.echo(f"Showing {len(records)} of {total}")
        finally:
            await db.close()

    asyncio.run(run())


@main.command()
@click.argument("name")
@click.argument("email")
@click.argument("content")
def submit(name: str, email: str, content: str) -> None:
    """Submit a source and send the confirmation email.

    Example:
        science-sources submit "Jane Doe" jane@example.org "Astrophysicist, cosmic rays"
    """
    from science_sources.storage.database import Database

    async def run():
        db = Database()
        await db.connect()

        try:
            service = _build_service(db)
            record = await service.create(name, email, content)
        finally:
            await db.close()

        if record is None:
            click.echo(click.style("Submission failed", fg="red"))
            sys.exit(1)

        click.echo(f"Source {record.id} created ({record.status_label})")

    asyncio.run(run())


def _moderate(source_id: int, action: str) -> None:
    from science_sources.sources.errors import InvalidTransition
    from science_sources.storage.database import Database

    async def run():
        db = Database()
        await db.connect()

        try:
            service = _build_service(db)
            source = await service.load(source_id)
            if source is None:
                click.echo(click.style(f"Source {source_id} not found", fg="red"))
                sys.exit(1)

            try:
                if action == "publish":
                    await service.publish(source)
                else:
                    await service.trash(source)
            except InvalidTransition as e:
                click.echo(click.style(str(e), fg="red"))
                sys.exit(1)
        finally:
            await db.close()

        click.echo(f"Source {source_id}: {source.record.status_label}")

    asyncio.run(run())


@main.command()
@click.argument("source_id", type=int)
def publish(source_id: int) -> None:
    """Publish a pending source."""
    _moderate(source_id, "publish")


@main.command()
@click.argument("source_id", type=int)
def trash(source_id: int) -> None:
    """Trash a source."""
    _moderate(source_id, "trash")


if __name__ == "__main__":
    main()
