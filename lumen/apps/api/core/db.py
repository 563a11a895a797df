from __future__ import annotations

import json
import logging
import uuid
from typing import Any

import asyncpg

from lumen.libs.schemas.settings import get_settings

logger = logging.getLogger(__name__)

POOL: asyncpg.Pool | None = None


async def _init_connection(connection: asyncpg.Connection) -> None:
    # jsonb comes back as Python lists/dicts instead of text.
    await connection.set_type_codec("jsonb", encoder=json.dumps, decoder=json.loads, schema="pg_catalog")


def _bind(args: Any) -> tuple:
    return tuple(str(arg) if isinstance(arg, uuid.UUID) else arg for arg in args)


def _row(record: Any) -> dict[str, Any] | None:
    if record is None:
        return None
    row = dict(record)
    for key, value in row.items():
        if isinstance(value, uuid.UUID):
            row[key] = str(value)
    return row


async def get_pool() -> asyncpg.Pool:
    global POOL
    if POOL is None:
        dsn = get_settings().database_url
        if not dsn:
            raise RuntimeError("Missing required env var: DATABASE_URL")
        POOL = await asyncpg.create_pool(dsn, statement_cache_size=0, init=_init_connection)
        logger.info("database pool created", extra={"event": "db_pool_created"})
    return POOL


async def close_pool() -> None:
    global POOL
    if POOL is not None:
        await POOL.close()
        POOL = None
        logger.info("database pool closed", extra={"event": "db_pool_closed"})


async def q(sql: str, *args: Any, one: bool = False) -> Any:
    """Run a query; a list of dict rows, or the first row (or None) with ``one``."""
    pool = await get_pool()
    async with pool.acquire() as connection:
        if one:
            return _row(await connection.fetchrow(sql, *_bind(args)))
        records: list[asyncpg.Record] = await connection.fetch(sql, *_bind(args))
    return [_row(record) for record in records]


async def exec(sql: str, *args: Any) -> str:
    pool = await get_pool()
    async with pool.acquire() as connection:
        return await connection.execute(sql, *_bind(args))
