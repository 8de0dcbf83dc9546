"""
Typer CLI for the quiz server.

Commands:
    quiz serve              - Run the TCP quiz server
    quiz local              - Run one quiz session on this terminal
    quiz db init            - Initialize database tables
    quiz db seed            - Insert the default quizzes into an empty store
    quiz config             - Show the active configuration
    quiz version            - Show version information

Usage:
    quiz --help
    quiz serve --port 3030
    quiz local
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import Settings, get_settings

app = typer.Typer(
    help="quiz-server CLI: interactive quiz sessions over TCP or the terminal",
    no_args_is_help=True,
)

console = Console()


def configure_logging(settings: Settings, *, console_level: str | None = None) -> None:
    """Route loguru output to stderr and, if configured, a rotating file."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=console_level or settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level="DEBUG",
            rotation="5 MB",
            retention=3,
            encoding="utf-8",
        )


def _open_store(settings: Settings, *, seed: bool):
    """Create tables and return a store bound to the configured database."""
    from src.db.database import get_engine, init_db
    from src.db.store import QuizStore

    engine = get_engine()
    init_db(engine)
    store = QuizStore(engine)
    if seed:
        asyncio.run(store.seed())
    return store


# ========================================
# SESSION COMMANDS
# ========================================


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", "-h", help="Bind host (default from settings)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (default from settings)"),
) -> None:
    """
    Run the TCP quiz server until interrupted.

    Connect with any line-oriented client, e.g. `nc localhost 3030`.
    """
    from src.delivery.server import QuizServer

    settings = get_settings()
    configure_logging(settings)
    store = _open_store(settings, seed=settings.seed_on_start)

    async def _serve() -> None:
        server = QuizServer(store, settings)
        await server.start(host, port)
        try:
            await server.serve_forever()
        finally:
            await server.stop()

    try:
        asyncio.run(_serve())
    except KeyboardInterrupt:
        rprint("\n[dim]Server stopped by user[/dim]")


@app.command("local")
def local() -> None:
    """Run one quiz session on this terminal."""
    from src.delivery.server import run_terminal_session

    settings = get_settings()
    # Keep the terminal for the session; log lines still reach the log file.
    configure_logging(settings, console_level="WARNING")
    store = _open_store(settings, seed=settings.seed_on_start)

    try:
        asyncio.run(run_terminal_session(store, settings))
    except KeyboardInterrupt:
        rprint("\n[dim]Bye.[/dim]")


# ========================================
# DATABASE COMMANDS
# ========================================

db_app = typer.Typer(help="Database management (init, seed)")
app.add_typer(db_app, name="db")


@db_app.command("init")
def db_init() -> None:
    """
    Initialize database tables from SQLAlchemy models.

    Safe to run multiple times (idempotent).
    """
    configure_logging(get_settings())
    from src.db.database import init_db

    init_db()
    rprint("[green]✓[/green] Database initialized!")


@db_app.command("seed")
def db_seed() -> None:
    """Insert the default quizzes if the store is empty."""
    settings = get_settings()
    configure_logging(settings)
    store = _open_store(settings, seed=False)

    inserted = asyncio.run(store.seed())
    if inserted:
        rprint(f"[green]✓[/green] Seeded {inserted} quizzes")
    else:
        rprint("[yellow]⚠[/yellow] Store already has quizzes, nothing seeded")


# ========================================
# INFO COMMANDS
# ========================================


@app.command("config")
def show_config() -> None:
    """Show the active configuration."""
    settings = get_settings()

    table = Table(title="Quiz Server Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in settings.model_dump().items():
        table.add_row(name, str(value))

    console.print(table)


@app.command("version")
def show_version() -> None:
    """Show version information."""
    rprint("[bold]quiz-server[/bold] v1.0.0")
    rprint("  Interactive quiz sessions over TCP")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
