"""Bootstrap the Postgres schema the record store reads and writes."""

from __future__ import annotations

import asyncio
import logging

import asyncpg

from lumen.libs.logging_utils import configure_logging
from lumen.libs.schemas import get_settings

logger = logging.getLogger(__name__)

MIGRATION_STATEMENTS = (
    'CREATE EXTENSION IF NOT EXISTS "pgcrypto";',
    """
    CREATE TABLE IF NOT EXISTS journal_entries (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        content text,
        transcription text,
        audio_url text,
        processing_status text,
        processing_type text,
        created_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS check_ins (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        mood text,
        energy text,
        sleep_hours double precision,
        sleep_minutes double precision,
        created_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS goals (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        title text,
        status text NOT NULL DEFAULT 'pending',
        life_area_id text,
        progress double precision NOT NULL DEFAULT 0,
        target_date date,
        created_at timestamptz NOT NULL DEFAULT now()
        updated_at timestamptz,
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS people (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        name text NOT NULL,
        created_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS finance_entries (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        category text NOT NULL,
        amount double precision NOT NULL DEFAULT 0,
        description text NOT NULL DEFAULT '',
        date timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        title text,
        status text NOT NULL DEFAULT 'pending',
        created_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS soul_matrix (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        traits text,
        updated_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS wheel_of_life (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        life_areas text,
        created_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS recaps (
        id uuid PRIMARY KEY DEFAULT gen_random_uuid(),
        user_id text NOT NULL,
        type text NOT NULL,
        period_start timestamptz NOT NULL,
        period_end timestamptz NOT NULL,
        content text NOT NULL DEFAULT '',
        insights jsonb NOT NULL DEFAULT '[]'::jsonb,
        recommendations jsonb NOT NULL DEFAULT '[]'::jsonb,
        life_area_improvements jsonb NOT NULL DEFAULT '[]'::jsonb,
        metrics jsonb NOT NULL DEFAULT '{}'::jsonb,
        created_at timestamptz NOT NULL DEFAULT now()
    );
    """,
    "CREATE INDEX IF NOT EXISTS journal_entries_user_created_idx ON journal_entries (user_id, created_at);",
    "CREATE INDEX IF NOT EXISTS check_ins_user_created_idx ON check_ins (user_id, created_at);",
    "CREATE INDEX IF NOT EXISTS finance_entries_user_date_idx ON finance_entries (user_id, date);",
    "CREATE INDEX IF NOT EXISTS recaps_user_created_idx ON recaps (user_id, created_at DESC);",
)


async def migrate() -> None:
    settings = get_settings()
    conn = await asyncpg.connect(settings.postgres_dsn, statement_cache_size=0)
    try:
        for statement in MIGRATION_STATEMENTS:
            await conn.execute(statement)
    finally:
        await conn.close()
    logger.info("schema ready", extra={"event": "migrate_done", "statements": len(MIGRATION_STATEMENTS)})


def main() -> None:  # pragma: no cover - CLI entrypoint
    configure_logging()
    asyncio.run(migrate())


if __name__ == "__main__":  # pragma: no cover
    main()
