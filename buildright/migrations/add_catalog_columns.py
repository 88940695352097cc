"""Migration: Add catalog linkage columns and the abbreviation unique index.

This migration adds:
1. building_code_sections.building_code_version_id - links sections to a version
2. multimodal_embeddings.chat_id - indexed chat column, backfilled from metadata
3. A unique index on building_codes.code_abbreviation

Every statement is idempotent, so it is safe to re-run on a partially
migrated database.

Usage:
    python -m buildright.migrations.add_catalog_columns --execute
"""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from buildright.db.connection import get_session

logger = logging.getLogger(__name__)
console = Console()

app = typer.Typer()

# (table, column) pairs reported before and after the run
TRACKED_COLUMNS = [
    ("building_code_sections", "building_code_version_id"),
    ("multimodal_embeddings", "chat_id"),
]

MIGRATION_SQL = """
-- ============================================================================
-- Step 1: Link sections to versions
-- ============================================================================
ALTER TABLE building_code_sections
ADD COLUMN IF NOT EXISTS building_code_version_id uuid;

CREATE INDEX IF NOT EXISTS idx_building_code_sections_version_id
ON building_code_sections (building_code_version_id);

-- ============================================================================
-- Step 2: Promote chatId out of embedding metadata
-- ============================================================================
ALTER TABLE multimodal_embeddings
ADD COLUMN IF NOT EXISTS chat_id text;

CREATE INDEX IF NOT EXISTS ix_multimodal_embeddings_chat_id
ON multimodal_embeddings (chat_id);

UPDATE multimodal_embeddings
SET chat_id = metadata::json ->> 'chatId'
WHERE chat_id IS NULL
  AND metadata IS NOT NULL
  AND json_typeof(metadata::json) = 'object';

-- ============================================================================
-- Step 3: Store-level uniqueness for code abbreviations
-- ============================================================================
CREATE UNIQUE INDEX IF NOT EXISTS idx_building_codes_abbreviation_unique
ON building_codes (code_abbreviation);
"""

ROLLBACK_SQL = """
DROP INDEX IF EXISTS idx_building_codes_abbreviation_unique;
DROP INDEX IF EXISTS ix_multimodal_embeddings_chat_id;
ALTER TABLE multimodal_embeddings DROP COLUMN IF EXISTS chat_id;
"""


def split_statements(sql: str) -> list[str]:
    """Split a script into executable statements, dropping comment-only chunks."""
    statements = []
    for chunk in sql.split(";"):
        lines = [line for line in chunk.splitlines() if not line.strip().startswith("--")]
        stmt = "\n".join(lines).strip()
        if stmt:
            statements.append(stmt)
    return statements


async def check_column_exists(session: AsyncSession, table_name: str, column_name: str) -> bool:
    """Check if a column exists in the database."""
    result = await session.execute(
        text(
            """
            SELECT EXISTS (
                SELECT FROM information_schema.columns
                WHERE table_name = :table_name
                AND column_name = :column_name
            )
        """
        ),
        {"table_name": table_name, "column_name": column_name},
    )
    return bool(result.scalar())


async def _report_columns(session: AsyncSession, heading: str) -> dict[str, bool]:
    console.print(f"[yellow]{heading}:[/yellow]")
    state = {}
    for table_name, column_name in TRACKED_COLUMNS:
        exists = await check_column_exists(session, table_name, column_name)
        state[f"{table_name}.{column_name}"] = exists
        console.print(f"  • {table_name}.{column_name}: {'✓ exists' if exists else '✗ missing'}")
    return state


async def run_migration(session: AsyncSession, dry_run: bool = False) -> None:
    """Execute the migration."""
    console.print("\n[bold cyan]═══ Catalog Columns Migration ═══[/bold cyan]\n")

    await _report_columns(session, "Current state")

    if dry_run:
        console.print("\n[bold yellow]DRY RUN MODE - SQL that would be executed:[/bold yellow]")
        console.print(MIGRATION_SQL)
        return

    console.print("\n[bold yellow]Executing migration...[/bold yellow]")

    try:
        # asyncpg rejects multiple statements in one execute()
        statements = split_statements(MIGRATION_SQL)
        for i, stmt in enumerate(statements, 1):
            console.print(f"  [dim]Executing statement {i}/{len(statements)}...[/dim]")
            await session.execute(text(stmt))

        await session.commit()
        console.print("\n[bold green]✓ Migration completed successfully![/bold green]\n")
        logger.info("Catalog columns migration applied (%d statements)", len(statements))

        state = await _report_columns(session, "Verification")
        if not all(state.values()):
            console.print("[red]✗ Some columns are still missing[/red]")

    except Exception as e:
        await session.rollback()
        console.print(f"\n[bold red]✗ Migration failed: {e}[/bold red]")
        raise


async def run_rollback(session: AsyncSession, dry_run: bool = False) -> None:
    """Rollback the migration.

    building_code_version_id is left in place: sections cannot be linked
    to versions without it.
    """
    console.print("\n[bold red]═══ Rollback Catalog Columns Migration ═══[/bold red]\n")

    if dry_run:
        console.print("[bold yellow]DRY RUN MODE - SQL that would be executed:[/bold yellow]")
        console.print(ROLLBACK_SQL)
        return

    try:
        for stmt in split_statements(ROLLBACK_SQL):
            await session.execute(text(stmt))
        await session.commit()
        console.print("\n[bold green]✓ Rollback completed successfully![/bold green]\n")
    except Exception as e:
        await session.rollback()
        console.print(f"\n[bold red]✗ Rollback failed: {e}[/bold red]")
        raise


@app.command()
def migrate(
    execute: bool = typer.Option(False, "--execute", help="Actually run the migration (default is dry-run)"),
    rollback: bool = typer.Option(False, "--rollback", help="Rollback the migration"),
):
    """Run or rollback the catalog columns migration."""

    async def _run():
        async with get_session() as session:
            if rollback:
                await run_rollback(session, dry_run=not execute)
            else:
                await run_migration(session, dry_run=not execute)

    asyncio.run(_run())


if __name__ == "__main__":
    app()
