"""Database readiness checks for BuildRight.

Verifies that the tables and columns the API depends on exist before
documents are uploaded, and reports row counts for the catalog tables.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import func, inspect, select, table
from sqlalchemy.ext.asyncio import AsyncConnection

logger = logging.getLogger(__name__)

REQUIRED_SCHEMA: dict[str, list[str]] = {
    "building_codes": [
        "id",
        "code_name",
        "code_abbreviation",
        "jurisdiction",
        "code_type",
        "is_active",
        "created_at",
    ],
    "building_code_versions": [
        "id",
        "building_code_id",
        "version",
        "is_default",
        "processing_status",
        "created_at",
    ],
    "building_code_sections": ["id", "building_code_version_id"],
    "multimodal_embeddings": ["id", "content_type", "metadata", "chat_id"],
    "chats": ["id", "title", "user_id"],
}


@dataclass
class ReadinessReport:
    missing_tables: list[str] = field(default_factory=list)
    missing_columns: dict[str, list[str]] = field(default_factory=dict)
    row_counts: dict[str, int] = field(default_factory=dict)

    @property
    def ready(self) -> bool:
        return not self.missing_tables and not self.missing_columns


def _inspect_schema(sync_conn) -> tuple[set[str], dict[str, set[str]]]:
    inspector = inspect(sync_conn)
    tables = set(inspector.get_table_names())
    columns = {
        name: {col["name"] for col in inspector.get_columns(name)}
        for name in REQUIRED_SCHEMA
        if name in tables
    }
    return tables, columns


async def check_readiness(conn: AsyncConnection) -> ReadinessReport:
    """Inspect the connected database against REQUIRED_SCHEMA."""
    tables, columns = await conn.run_sync(_inspect_schema)

    report = ReadinessReport()
    for table_name, required in REQUIRED_SCHEMA.items():
        if table_name not in tables:
            report.missing_tables.append(table_name)
            continue

        missing = [col for col in required if col not in columns[table_name]]
        if missing:
            report.missing_columns[table_name] = missing

        result = await conn.execute(select(func.count()).select_from(table(table_name)))
        report.row_counts[table_name] = result.scalar_one()

    if report.ready:
        logger.info("✓ Database schema ready (%d tables checked)", len(REQUIRED_SCHEMA))
    else:
        logger.warning(
            "⚠ Database schema incomplete: tables=%s columns=%s",
            report.missing_tables,
            report.missing_columns,
        )
    return report
