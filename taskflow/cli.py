import click


@click.group()
def main() -> None:
    """Taskflow - daily outreach quota service for sales agents."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from TASKFLOW_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from TASKFLOW_PORT or 8000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the quota allocation API server."""
    import uvicorn

    from taskflow.allocation.settings import TaskflowSettings

    settings = TaskflowSettings()

    uvicorn.run(
        "taskflow.allocation.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


# ---------------------------------------------------------------------------
# Database management
# ---------------------------------------------------------------------------


def _alembic_config():
    """Build an Alembic Config from the package's alembic.ini.

    Both alembic.ini and the alembic/ directory live inside the package,
    so this works whether running from source or from an installed package.
    """
    from pathlib import Path

    from alembic.config import Config

    ini_path = Path(__file__).parent / "allocation" / "alembic.ini"
    return Config(str(ini_path))


@main.group()
def db() -> None:
    """Database migration and management commands."""


@db.command()
@click.option("--revision", default="head", help="Target revision (default: head).")
def upgrade(revision: str) -> None:
    """Run database migrations forward."""
    from alembic import command

    command.upgrade(_alembic_config(), revision)
    click.echo(f"Database upgraded to {revision}.")


@db.command()
@click.option("--revision", default="-1", help="Target revision (default: -1, one step back).")
def downgrade(revision: str) -> None:
    """Roll back database migrations."""
    from alembic import command

    command.downgrade(_alembic_config(), revision)
    click.echo(f"Database downgraded to {revision}.")


@db.command()
@click.argument("message")
def migrate(message: str) -> None:
    """Autogenerate a new migration from model changes."""
    from alembic import command

    command.revision(_alembic_config(), message=message, autogenerate=True)
    click.echo(f"Migration generated: {message}")


@db.command()
def current() -> None:
    """Show current database revision."""
    from alembic import command

    command.current(_alembic_config(), verbose=True)


@db.command()
def history() -> None:
    """Show migration history."""
    from alembic import command

    command.history(_alembic_config(), verbose=True)


# ---------------------------------------------------------------------------
# Quota operations
# ---------------------------------------------------------------------------


@main.group()
def quota() -> None:
    """Inspect and generate daily quotas from the command line."""


@quota.command()
@click.argument("agent_id")
@click.option(
    "--date",
    "quota_date",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Calendar day (default: today, local time).",
)
def allocate(agent_id: str, quota_date) -> None:
    """Fetch (or generate) AGENT_ID's allocation and print it as JSON."""
    import asyncio
    from datetime import date

    from taskflow.allocation.log import setup_logging
    from taskflow.allocation.settings import TaskflowSettings

    settings = TaskflowSettings()
    setup_logging(settings.log_level)
    if not settings.database_url:
        raise click.ClickException("TASKFLOW_DATABASE_URL is not set.")

    day = quota_date.date() if quota_date is not None else date.today()
    payload = asyncio.run(_allocate(settings, agent_id, day))
    click.echo(payload)


async def _allocate(settings, agent_id: str, day) -> str:
    from taskflow.allocation.app import create_catalog, create_quota_service
    from taskflow.allocation.db.engine import create_engine, create_session_factory
    from taskflow.allocation.models.api import DailyQuotaResponse

    engine = create_engine(settings.database_url, connect_timeout=settings.database_connect_timeout)
    catalog, catalog_engine = create_catalog(settings, engine)
    try:
        service = create_quota_service(settings, catalog)
        async with create_session_factory(engine)() as db:
            result = await service.fetch_or_create(db, agent_id, day)
        return DailyQuotaResponse.from_result(result).model_dump_json(indent=2)
    finally:
        if catalog_engine is not None:
            await catalog_engine.dispose()
        await engine.dispose()


if __name__ == "__main__":
    main()
