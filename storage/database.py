"""Async PostgreSQL connection handle."""

import json
import asyncpg
import structlog
from pathlib import Path
from config.settings import settings

log = structlog.get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"


async def _init_connection(conn: asyncpg.Connection) -> None:
    """Set up JSON codec so JSONB columns return dicts/lists, not strings."""
    await conn.set_type_codec(
        "jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )
    await conn.set_type_codec(
        "json", encoder=json.dumps, decoder=json.loads, schema="pg_catalog"
    )


class Database:
    """Owns one asyncpg pool; constructed by the caller and passed to repositories."""

    def __init__(self, dsn: str | None = None, min_size: int = 1, max_size: int = 5) -> None:
        self.dsn = dsn or settings.database_url
        self.min_size = min_size
        self.max_size = max_size
        self._pool: asyncpg.Pool | None = None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database is not connected")
        return self._pool

    async def connect(self) -> asyncpg.Pool:
        if self._pool is None:
            self._pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                init=_init_connection,
            )
            log.info("database_pool_created")
        return self._pool

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            log.info("database_pool_closed")

    async def run_migrations(self, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
        """Apply pending SQL migration files in filename order. Returns those applied."""
        applied_now: list[str] = []
        async with self.pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS _migrations (
                    filename VARCHAR(255) PRIMARY KEY,
                    applied_at TIMESTAMPTZ DEFAULT NOW()
                )
            """)

            applied = {
                row["filename"]
                for row in await conn.fetch("SELECT filename FROM _migrations")
            }

            for migration_file in sorted(migrations_dir.glob("*.sql")):
                if migration_file.name in applied:
                    continue

                log.info("applying_migration", filename=migration_file.name)
                async with conn.transaction():
                    await conn.execute(migration_file.read_text())
                    await conn.execute(
                        "INSERT INTO _migrations (filename) VALUES ($1)",
                        migration_file.name,
                    )
                applied_now.append(migration_file.name)
                log.info("migration_applied", filename=migration_file.name)
        return applied_now
