"""BuildRight CLI.

Commands:
- init: Initialize database schema
- seed-codes: Insert the default building code catalog
- codes: List the building code catalog
- readiness: Verify tables/columns required by the API
- migrate: Run the catalog columns migration
- web serve: Run the FastAPI server
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from buildright.catalog import list_building_codes, seed_default_codes
from buildright.config import get_config
from buildright.db.connection import close_db, get_engine, get_session, init_db
from buildright.readiness import REQUIRED_SCHEMA, check_readiness

app = typer.Typer(
    name="buildright",
    help="BuildRight - building code catalog and semantic search readiness",
    no_args_is_help=True,
)

web_cli = typer.Typer(help="Web API")
app.add_typer(web_cli, name="web")

console = Console()


@app.command()
def init(
    drop: bool = typer.Option(False, "--drop", help="Drop existing tables"),
):
    """Initialize database schema."""
    config = get_config()
    console.print(f"[bold]Initializing database:[/bold] {config.db.url}")

    async def _init():
        if drop:
            console.print("[yellow]Dropping existing tables...[/yellow]")
        await init_db(drop=drop)
        await close_db()

    asyncio.run(_init())
    console.print("[bold green]✓[/bold green] Database initialized")


@app.command(name="seed-codes")
def seed_codes_cmd():
    """Insert FBC, IBC, IFC, IPC and IMC with a default 2023 version."""

    async def _seed():
        async with get_session() as session:
            inserted = await seed_default_codes(session)
        await close_db()
        return inserted

    inserted = asyncio.run(_seed())
    if inserted:
        console.print(f"[bold green]✓[/bold green] {inserted} building codes seeded")
    else:
        console.print("[yellow]Default building codes already present[/yellow]")


@app.command()
def codes(
    code_type: str | None = typer.Option(None, "--type", help="Filter by code type"),
    jurisdiction: str | None = typer.Option(None, "--jurisdiction", help="Filter by jurisdiction"),
    include_inactive: bool = typer.Option(False, "--all", help="Include inactive codes"),
):
    """List building codes with their versions."""

    async def _codes():
        async with get_session() as session:
            listing = await list_building_codes(
                session,
                code_type=code_type,
                jurisdiction=jurisdiction,
                include_inactive=include_inactive,
            )
        await close_db()
        return listing

    listing = asyncio.run(_codes())

    table = Table(title="Building Codes")
    table.add_column("Code", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Jurisdiction")
    table.add_column("Active", justify="center")
    table.add_column("Versions (sections)")

    for code in listing.codes:
        versions = ", ".join(
            f"{v.version}{'*' if v.is_default else ''} ({v.section_count})" for v in code.versions
        )
        table.add_row(
            code.code_abbreviation,
            code.code_name,
            code.code_type,
            code.jurisdiction or "-",
            "✓" if code.is_active else "✗",
            versions or "-",
        )

    console.print(table)
    console.print(
        f"{listing.stats.total_codes} codes, {listing.stats.active_codes_count} active"
    )


@app.command()
def readiness():
    """Check that the database is ready for uploads and catalog queries."""
    console.print("[bold]🔍 BuildRight database readiness[/bold]")

    async def _check():
        engine = get_engine()
        async with engine.connect() as conn:
            report = await check_readiness(conn)
        await close_db()
        return report

    try:
        report = asyncio.run(_check())
    except Exception as e:
        console.print(f"[red]✗ Database connection failed: {e}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Required tables")
    table.add_column("Table", style="cyan")
    table.add_column("Status")
    table.add_column("Rows", justify="right", style="green")

    for table_name in REQUIRED_SCHEMA:
        if table_name in report.missing_tables:
            status = "[red]✗ missing[/red]"
        elif table_name in report.missing_columns:
            status = f"[yellow]⚠ missing {', '.join(report.missing_columns[table_name])}[/yellow]"
        else:
            status = "[green]✓[/green]"
        rows = report.row_counts.get(table_name)
        table.add_row(table_name, status, "-" if rows is None else str(rows))

    console.print(table)

    if not report.ready:
        console.print("[bold red]Database needs attention[/bold red] - run migrations first")
        raise typer.Exit(code=1)
    console.print("[bold green]✓ Database is ready[/bold green]")


@app.command()
def migrate(
    execute: bool = typer.Option(False, "--execute", help="Execute migration (default: dry-run)"),
    rollback: bool = typer.Option(False, "--rollback", help="Rollback migration"),
):
    """Add catalog linkage columns and the abbreviation unique index."""
    from buildright.migrations.add_catalog_columns import migrate as run_migration

    run_migration(execute=execute, rollback=rollback)


@web_cli.command("serve")
def web_serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind"),
    port: int = typer.Option(8001, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload (dev only)"),
):
    """Run the FastAPI server."""
    import uvicorn

    typer.echo(f"Starting BuildRight API on http://{host}:{port}")
    uvicorn.run("buildright.web.app:app", host=host, port=port, reload=reload, workers=1)


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
