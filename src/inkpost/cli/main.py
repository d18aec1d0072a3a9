"""Inkpost CLI — run the API server and maintenance tasks.

Usage:
    inkpost serve                          # Run the API with uvicorn
    inkpost init-db                        # Create tables (dev; prod uses alembic)
    inkpost export-static -o site          # Dump posts as static JSON
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from inkpost import __version__
from inkpost.config import settings
from inkpost.errors import StoreUnavailableError


def _run(coro):
    """Run an async coroutine from a synchronous click handler."""
    return asyncio.run(coro)


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="inkpost")
def main():
    """Inkpost — authenticated blogging API."""


# ---------------------------------------------------------------------------
# inkpost serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default: INKPOST_HOST)")
@click.option("--port", type=int, default=None, help="Port (default: INKPOST_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes (dev only)")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server.

    On SIGINT/SIGTERM uvicorn stops accepting connections and gives
    in-flight requests INKPOST_SHUTDOWN_GRACE_SECONDS to finish.
    """
    import uvicorn

    uvicorn.run(
        "inkpost.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )


# ---------------------------------------------------------------------------
# inkpost init-db
# ---------------------------------------------------------------------------


@main.command("init-db")
def init_db():
    """Create the users and posts tables if they don't exist."""
    from inkpost.db.engine import check_store, create_schema, engine

    async def _go():
        try:
            await check_store(engine)
            await create_schema(engine)
        finally:
            await engine.dispose()

    try:
        _run(_go())
    except StoreUnavailableError as e:
        _fail(e.message)
    click.secho("Database schema ready.", fg="green")


# ---------------------------------------------------------------------------
# inkpost export-static
# ---------------------------------------------------------------------------


@main.command("export-static")
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("static"),
    show_default=True,
    help="Output directory for the static site",
)
def export_static(output: Path):
    """Export all posts as JSON files for a static frontend."""
    from inkpost.db.engine import async_session_factory, check_store, engine
    from inkpost.services.static_export import export_posts

    async def _go() -> int:
        try:
            await check_store(engine)
            async with async_session_factory() as session:
                return await export_posts(session, output)
        finally:
            await engine.dispose()

    click.echo(f"Generating static site in {output}...")
    try:
        count = _run(_go())
    except StoreUnavailableError as e:
        _fail(e.message)
    click.secho(f"Static export complete: {count} posts.", fg="green")


if __name__ == "__main__":
    main()
