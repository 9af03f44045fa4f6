"""Command-line interface for Inkpost.

This module provides the CLI commands for running and managing
the Inkpost auth service.
"""

import asyncio

import click

from inkpost import __version__
from inkpost.core.config import get_settings
from inkpost.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="Inkpost")
def cli() -> None:
    """Inkpost - authentication and session service for the Inkpost blog.

    Settings are read from INKPOST_* environment variables and .env files.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the Inkpost server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if bind_workers > 1 and settings.database_url.startswith("sqlite"):
        click.echo(
            "Error: SQLite does not support multiple worker processes. "
            "Use --workers 1 or switch to PostgreSQL.",
            err=True,
        )
        raise SystemExit(1)

    configure_logging(settings)
    logger = get_logger(__name__)
    logger.info(
        "Starting Inkpost server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "inkpost.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command()
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
def init_db(force: bool) -> None:
    """Create all database tables.

    Use this only in development. In production, use migrations instead.
    """
    from inkpost.infrastructure.persistence.database import DatabaseManager

    settings = get_settings()
    configure_logging(settings)

    if settings.is_production and not force:
        click.echo(
            "ERROR: Running in production mode. Use migrations instead of init-db.",
            err=True,
        )
        raise SystemExit(1)

    if not force:
        click.confirm("This will create all database tables. Continue?", abort=True, default=False)

    async def initialize() -> None:
        db = DatabaseManager(settings)
        try:
            await db.create_tables()
            click.echo("Database initialized successfully.")
        finally:
            await db.disconnect()

    asyncio.run(initialize())


@cli.command()
def cleanup_tokens() -> None:
    """Delete expired refresh tokens and stale reset/verification tokens."""
    from inkpost.infrastructure.persistence.database import DatabaseManager
    from inkpost.infrastructure.services.token_cleanup import purge_tokens

    settings = get_settings()
    configure_logging(settings)

    async def purge():
        db = DatabaseManager(settings)
        try:
            return await purge_tokens(db, settings)
        finally:
            await db.disconnect()

    result = asyncio.run(purge())
    click.echo(
        f"Deleted {result.refresh_tokens} refresh, "
        f"{result.password_reset_tokens} password reset and "
        f"{result.email_verification_tokens} email verification tokens."
    )


@cli.command()
def info() -> None:
    """Display Inkpost configuration."""
    settings = get_settings()

    click.echo(f"""
Inkpost v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}
  API Prefix:   {settings.api_prefix}
  Frontend URL: {settings.frontend_url}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  URL:          {settings.database_url}
  Pool Size:    {settings.db_pool_size}
  Echo:         {settings.db_echo}

Tokens:
  Access:       {settings.access_token_expires_in}
  Refresh:      {settings.refresh_token_expires_in}
  Reset:        {settings.password_reset_expire_minutes} minutes
  Verification: {settings.email_verification_expire_hours} hours

Email:
  SMTP Host:    {settings.smtp_host or '(console)'}
  From:         {settings.email_from_name} <{settings.email_from_address}>

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> None:
    """Main entry point for the CLI.

    Called when the `inkpost` command is run or when using `python -m inkpost`.
    """
    cli()


if __name__ == "__main__":
    main()
