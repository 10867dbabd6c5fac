"""Ephemeris CLI — run the server and prepare the database.

Usage:
    ephemeris serve                      # Run the API with uvicorn
    ephemeris serve --reload             # ... restarting on code changes
    ephemeris init-db                    # Create tables from the ORM models
    ephemeris check-db                   # Verify the database is reachable
"""

from __future__ import annotations

import asyncio
import sys

import click

from ephemeris import __version__
from ephemeris.config import settings


def _run(coro):
    """Run an async coroutine from a synchronous Click handler."""
    return asyncio.run(coro)


@click.group()
@click.version_option(__version__, prog_name="ephemeris")
def cli():
    """Ephemeris blogging backend."""


@cli.command()
@click.option("--host", default=None, help="Bind address (default: EPHEMERIS_HOST).")
@click.option("--port", type=int, default=None, help="Port (default: EPHEMERIS_PORT).")
@click.option("--reload", is_flag=True, help="Restart on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "ephemeris.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@cli.command("init-db")
def init_db():
    """Create all tables that don't exist yet."""
    from ephemeris.db.engine import create_tables, engine

    async def _init():
        try:
            await create_tables(engine)
        finally:
            await engine.dispose()

    _run(_init())
    click.secho("Tables created.", fg="green")


@cli.command("check-db")
def check_db():
    """Exit non-zero if the database can't be reached."""
    from ephemeris.db.engine import check_connection, engine

    async def _check():
        try:
            await check_connection(engine)
        finally:
            await engine.dispose()

    try:
        _run(_check())
    except Exception as e:
        click.secho(f"Database unreachable: {e}", fg="red", err=True)
        sys.exit(1)
    click.secho("Database OK.", fg="green")


if __name__ == "__main__":
    cli()
