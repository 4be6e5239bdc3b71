"""
Schema bootstrap.

Applies the versioned .sql files shipped in todor/migrations/<dialect>/.
Callers run initialize_schema() once at process start. Each file is applied
in one transaction together with its schema_migrations row, so a failing
statement leaves neither its earlier statements nor the version behind.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from todor.db.interface import DatabaseAdapter

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent.parent / "migrations"


def _migrations_table(adapter: DatabaseAdapter) -> str:
    if adapter.dialect == "postgres":
        return "todor.schema_migrations"
    return "schema_migrations"


def split_statements(sql: str) -> list[str]:
    """Split a migration file into individual statements, dropping comments."""
    lines = [line.split("--", 1)[0] for line in sql.splitlines()]
    statements = []
    for chunk in "\n".join(lines).split(";"):
        statement = chunk.strip()
        if statement:
            statements.append(statement)
    return statements


async def applied_migrations(adapter: DatabaseAdapter) -> list[str]:
    """Versions recorded in the migrations table, oldest first."""
    rows = await adapter.fetch(f"SELECT version FROM {_migrations_table(adapter)} ORDER BY version")
    return [row["version"] for row in rows]


async def initialize_schema(adapter: DatabaseAdapter, migrations_dir: Path | None = None) -> list[str]:
    """
    Run pending database migrations.

    Args:
        adapter: Connected DatabaseAdapter
        migrations_dir: Override for the migrations root (tests)

    Returns:
        Versions applied by this call, in order
    """
    root = migrations_dir or MIGRATIONS_DIR
    dialect_dir = root / adapter.dialect
    if not dialect_dir.exists():
        logger.warning(f"Migrations directory not found: {dialect_dir}")
        return []

    await adapter.ensure_schema()

    table = _migrations_table(adapter)
    await adapter.execute(
        f"CREATE TABLE IF NOT EXISTS {table} (version TEXT PRIMARY KEY, applied_at TEXT NOT NULL)"
    )
    applied_versions = set(await applied_migrations(adapter))

    applied = []
    for sql_file in sorted(dialect_dir.glob("*.sql")):
        version = sql_file.name.split("_")[0]
        if version in applied_versions:
            continue

        logger.info(f"Running migration: {sql_file.name}")
        async with adapter.transaction():
            for statement in split_statements(sql_file.read_text()):
                await adapter.execute(statement)
            await adapter.execute(
                f"INSERT INTO {table} (version, applied_at) VALUES ($1, $2)",
                version, datetime.now(timezone.utc).isoformat(),
            )
        applied.append(version)

    if not applied:
        logger.debug("Schema up to date")
    return applied
