"""Tests for SQL migration files and the migration runner."""

import pytest
from pathlib import Path
from storage.database import MIGRATIONS_DIR, Database


class TestMigrationFiles:
    def test_migrations_exist(self):
        sql_files = sorted(MIGRATIONS_DIR.glob("*.sql"))
        assert [f.name for f in sql_files][0] == "001_pricing_schema.sql"

    def test_creates_graph_tables(self):
        sql = (MIGRATIONS_DIR / "001_pricing_schema.sql").read_text()
        for table in ("categories", "vendors", "models", "pricing", "pricing_history", "pricing_backups"):
            assert f"CREATE TABLE IF NOT EXISTS {table} (" in sql

    def test_one_pricing_row_per_model(self):
        sql = (MIGRATIONS_DIR / "001_pricing_schema.sql").read_text()
        assert "model_id INTEGER NOT NULL UNIQUE REFERENCES models(id)" in sql

    def test_non_negative_prices(self):
        sql = (MIGRATIONS_DIR / "001_pricing_schema.sql").read_text()
        assert "CHECK (input_text >= 0)" in sql
        assert "CHECK (output_text >= 0)" in sql


class TestDatabase:
    def test_pool_requires_connect(self):
        with pytest.raises(RuntimeError):
            Database(dsn="postgresql://localhost/test").pool

    async def test_applies_pending(self, fake_pool, fake_conn, tmp_path):
        (tmp_path / "001_a.sql").write_text("CREATE TABLE a (id INT);")
        (tmp_path / "002_b.sql").write_text("CREATE TABLE b (id INT);")
        fake_conn.fetch_results = [[{"filename": "001_a.sql"}]]
        db = Database(dsn="postgresql://localhost/test")
        db._pool = fake_pool
        applied = await db.run_migrations(Path(tmp_path))
        assert applied == ["002_b.sql"]
        executed = [q for q, _ in fake_conn._execute_calls]
        assert "CREATE TABLE b (id INT);" in executed
        assert "CREATE TABLE a (id INT);" not in executed

    async def test_nothing_pending(self, fake_pool, fake_conn, tmp_path):
        (tmp_path / "001_a.sql").write_text("SELECT 1;")
        fake_conn.fetch_results = [[{"filename": "001_a.sql"}]]
        db = Database(dsn="postgresql://localhost/test")
        db._pool = fake_pool
        assert await db.run_migrations(tmp_path) == []
