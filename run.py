#!/usr/bin/env python3
"""
Application Entry Script.

Main entry point for the notes API. All functionality is accessible
through command-line options.

Usage:
    python run.py --help
    python run.py --action server --verbose
    python run.py --action init-db
    python run.py --action migrate
    python run.py --action config
    python run.py --action test --test-type unit
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click

# Ensure project root is in path for absolute imports
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from notes_app.backend.core.config import get_app_config, get_database_url, get_settings
from notes_app.backend.core.logging import get_logger, setup_logging

ALEMBIC_INI = PROJECT_ROOT / "notes_app" / "backend" / "migrations" / "alembic.ini"


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--action",
    type=click.Choice(["server", "init-db", "migrate", "config", "test", "info"]),
    default="info",
    help="Action to perform.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option(
    "--host",
    default=None,
    help="Server host (for server action).",
)
@click.option(
    "--port",
    default=None,
    type=int,
    help="Server port (for server action).",
)
@click.option(
    "--reload",
    is_flag=True,
    help="Enable auto-reload (for server action).",
)
@click.option(
    "--test-type",
    type=click.Choice(["all", "unit", "integration"]),
    default="all",
    help="Test type to run (for test action).",
)
def main(
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
) -> None:
    """
    Notes API Entry Point.

    Run the server, prepare the database, view configuration,
    or run tests.

    Examples:

        # Start development server
        python run.py --action server --reload --verbose

        # Create tables and indexes if missing
        python run.py --action init-db

        # Apply Alembic migrations
        python run.py --action migrate

        # View loaded configuration
        python run.py --action config
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(get_app_config().logging, level=log_level, format_type="console")
    logger = get_logger(__name__)

    logger.debug("Starting application", extra={"action": action, "log_level": log_level})

    if action == "server":
        run_server(logger, host, port, reload)
    elif action == "init-db":
        init_db(logger)
    elif action == "migrate":
        run_migrations(logger)
    elif action == "config":
        show_config(logger)
    elif action == "test":
        run_tests(logger, test_type)
    elif action == "info":
        show_info(logger)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server with uvicorn."""
    server = get_app_config().application.server
    server_host = host or server.host
    server_port = port or server.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "notes_app.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]

    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def init_db(logger) -> None:
    """Create the users and notes tables and their indexes if absent."""
    from notes_app.backend.core.bootstrap import ensure_schema
    from notes_app.backend.core.database import Database

    app_config = get_app_config()
    database = Database.from_url(
        get_database_url(app_config.database, get_settings()),
        app_config.database,
    )

    async def _run() -> None:
        try:
            await ensure_schema(database.engine)
        finally:
            await database.dispose()

    try:
        asyncio.run(_run())
    except Exception as e:
        logger.error("Schema bootstrap failed", extra={"error": str(e)})
        click.echo(click.style(f"Schema bootstrap failed: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style("Database schema is in place.", fg="green"))


def run_migrations(logger) -> None:
    """Apply Alembic migrations up to head."""
    if not ALEMBIC_INI.exists():
        click.echo(click.style(f"Error: {ALEMBIC_INI} not found", fg="red"), err=True)
        sys.exit(1)

    cmd = [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), "upgrade", "head"]
    logger.info("Running migrations", extra={"command": " ".join(cmd)})

    try:
        subprocess.run(cmd, check=True, cwd=PROJECT_ROOT)
    except subprocess.CalledProcessError as e:
        logger.error("Migration failed", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    click.echo(f"\n{title}:")
    click.echo("-" * 40)
    _echo_values(values, indent)


def _echo_values(values: dict, indent: int) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_values(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration (secrets are never printed)."""
    click.echo("Application Configuration:")

    app_config = get_app_config()
    _echo_section("Application Settings (from YAML)", app_config.application.model_dump())
    _echo_section("Database Settings (from YAML)", app_config.database.model_dump())
    _echo_section("Logging Settings (from YAML)", app_config.logging.model_dump())
    _echo_section("Security Settings (from YAML)", app_config.security.model_dump())

    logger.info("Configuration displayed successfully")


def run_tests(logger, test_type: str) -> None:
    """Run the test suite."""
    logger.info("Running tests", extra={"type": test_type})

    cmd = [sys.executable, "-m", "pytest"]
    if test_type == "unit":
        cmd.append("tests/unit")
    elif test_type == "integration":
        cmd.append("tests/integration")
    else:
        cmd.append("tests/")
    cmd.append("-v")

    click.echo(f"Running: {' '.join(cmd)}\n")

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    sys.exit(result.returncode)


def show_info(logger) -> None:
    """Display application information."""
    application = get_app_config().application

    click.echo(application.name)
    click.echo("=" * 40)
    click.echo(f"Version: {application.version}")
    click.echo(f"Description: {application.description}")
    click.echo(f"API prefix: {application.api_prefix}")
    click.echo()
    click.echo("Available Actions:")
    click.echo("  --action server    Start the API server")
    click.echo("  --action init-db   Create tables and indexes if missing")
    click.echo("  --action migrate   Apply Alembic migrations")
    click.echo("  --action config    Display configuration")
    click.echo("  --action test      Run test suite")
    click.echo("  --action info      Show this information")
    click.echo()
    click.echo("Logging Options:")
    click.echo("  --verbose, -v      Enable INFO level logging")
    click.echo("  --debug, -d        Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
