import pytest

from lumen.apps.api.services.records.store import ENTITY_TABLES
from lumen.infra.scripts import migrate


def test_migration_creates_every_store_table():
    sql = "\n".join(migrate.MIGRATION_STATEMENTS)
    for table, _, _ in ENTITY_TABLES.values():
        assert f"CREATE TABLE IF NOT EXISTS {table}" in sql
    assert "CREATE TABLE IF NOT EXISTS recaps" in sql
    assert "metrics jsonb" in sql
    assert "finance_entries (user_id, date)" in sql
    assert "sleep_minutes double precision" in sql
    assert "processing_status text" in sql


@pytest.mark.asyncio
async def test_migrate_runs_each_statement(monkeypatch):
    executed = []

    class FakeConnection:
        async def execute(self, sql):
            executed.append(sql)

        async def close(self):
            executed.append("closed")

    async def fake_connect(dsn, **kwargs):
        return FakeConnection()

    monkeypatch.setattr(migrate.asyncpg, "connect", fake_connect)

    await migrate.migrate()

    assert executed[:-1] == list(migrate.MIGRATION_STATEMENTS)
    assert executed[-1] == "closed"
