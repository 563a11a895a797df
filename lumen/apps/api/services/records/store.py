"""Postgres-backed record source for the analytics engines, plus recap storage."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping, Sequence

from pydantic import BaseModel

from lumen.apps.api.core.db import exec as dbexec, q as dbfetch
from lumen.libs.json_utils import json_safe, loads_or_default
from lumen.libs.schemas.records import (
    AnalyticsInput,
    CheckIn,
    FinanceEntry,
    Goal,
    JournalEntry,
    Person,
    SoulMatrix,
    Task,
    WheelOfLife,
)
from lumen.libs.schemas.settings import get_settings

logger = logging.getLogger(__name__)

# entity type -> (table, column the date window applies to, model)
ENTITY_TABLES: dict[str, tuple[str, str, type[BaseModel]]] = {
    "journal_entries": ("journal_entries", "created_at", JournalEntry),
    "check_ins": ("check_ins", "created_at", CheckIn),
    "goals": ("goals", "created_at", Goal),
    "people": ("people", "created_at", Person),
    "finance_entries": ("finance_entries", "date", FinanceEntry),
    "tasks": ("tasks", "created_at", Task),
}

# jsonb column -> default, in INSERT order.
RECAP_JSON_COLUMNS: dict[str, Any] = {
    "insights": [],
    "recommendations": [],
    "life_area_improvements": [],
    "metrics": {},
}


def _entity(entity_type: str) -> tuple[str, str, type[BaseModel]]:
    try:
        return ENTITY_TABLES[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type: {entity_type}") from None


def _validate(model: type[BaseModel], rows: Sequence[Mapping[str, Any]]) -> list[Any]:
    return [model.model_validate(dict(row)) for row in rows]


async def get_records_by_user_and_range(
    user_id: str,
    entity_type: str,
    start: datetime,
    end: datetime,
    limit: int = 1000,
) -> list[Any]:
    """Records of one type inside ``[start, end]``, oldest first.

    The newest ``limit`` rows win when the window holds more than that.
    """
    table, column, model = _entity(entity_type)
    rows = await dbfetch(
        f"""
        SELECT *
        FROM {table}
        WHERE user_id = $1 AND {column} >= $2 AND {column} <= $3
        ORDER BY {column} DESC
        LIMIT $4
        """,
        user_id,
        start,
        end,
        limit,
    )
    return list(reversed(_validate(model, rows or [])))


async def get_people(user_id: str, limit: int = 1000) -> list[Person]:
    rows = await dbfetch(
        """
        SELECT *
        FROM people
        WHERE user_id = $1
        ORDER BY created_at ASC
        LIMIT $2
        """,
        user_id,
        limit,
    )
    return _validate(Person, rows or [])


async def get_goals(user_id: str, limit: int = 1000) -> list[Goal]:
    """Every goal the user has, oldest first; recap cards are not windowed."""
    rows = await dbfetch(
        """
        SELECT *
        FROM goals
        WHERE user_id = $1
        ORDER BY created_at ASC
        LIMIT $2
        """,
        user_id,
        limit,
    )
    return _validate(Goal, rows or [])


async def get_soul_matrix(user_id: str) -> SoulMatrix | None:
    row = await dbfetch(
        """
        SELECT traits
        FROM soul_matrix
        WHERE user_id = $1
        ORDER BY updated_at DESC
        LIMIT 1
        """,
        user_id,
        one=True,
    )
    return SoulMatrix.model_validate(dict(row)) if row else None


async def get_wheel_of_life(user_id: str) -> WheelOfLife | None:
    row = await dbfetch(
        """
        SELECT life_areas
        FROM wheel_of_life
        WHERE user_id = $1
        ORDER BY created_at DESC
        LIMIT 1
        """,
        user_id,
        one=True,
    )
    return WheelOfLife.model_validate(dict(row)) if row else None


async def load_snapshot(
    user_id: str,
    *,
    period: str,
    start: datetime,
    end: datetime,
) -> AnalyticsInput:
    """Everything the engines need for one user and window.

    People are not windowed; relationship metrics look at the whole network.
    """
    limit = get_settings().record_fetch_limit
    snapshot = AnalyticsInput(
        journal_entries=await get_records_by_user_and_range(user_id, "journal_entries", start, end, limit),
        check_ins=await get_records_by_user_and_range(user_id, "check_ins", start, end, limit),
        goals=await get_records_by_user_and_range(user_id, "goals", start, end, limit),
        people=await get_people(user_id, limit),
        finance_entries=await get_records_by_user_and_range(user_id, "finance_entries", start, end, limit),
        tasks=await get_records_by_user_and_range(user_id, "tasks", start, end, limit),
        soul_matrix=await get_soul_matrix(user_id),
        wheel_of_life=await get_wheel_of_life(user_id),
        period=period,
        start_date=start,
        end_date=end,
    )
    logger.debug(
        "snapshot loaded",
        extra={
            "event": "snapshot_loaded",
            "user_id": user_id,
            "period": period,
            "journal_entries": len(snapshot.journal_entries),
            "check_ins": len(snapshot.check_ins),
        },
    )
    return snapshot


async def save_recap(
    user_id: str,
    *,
    recap_type: str,
    period_start: datetime,
    period_end: datetime,
    recap: Mapping[str, Any],
) -> str:
    recap_id = str(uuid.uuid4())
    await dbexec(
        """
        INSERT INTO recaps (
            id, user_id, type, period_start, period_end, content,
            insights, recommendations, life_area_improvements, metrics, created_at
        )
        VALUES ($1, $2, $3, $4, $5, $6, $7::jsonb, $8::jsonb, $9::jsonb, $10::jsonb, $11)
        """,
        recap_id,
        user_id,
        recap_type,
        period_start,
        period_end,
        recap.get("content", ""),
        *(json_safe(recap.get(column, default)) for column, default in RECAP_JSON_COLUMNS.items()),
        datetime.now(timezone.utc),
    )
    logger.info(
        "recap saved",
        extra={"event": "recap_saved", "user_id": user_id, "recap_id": recap_id, "type": recap_type},
    )
    return recap_id


def _decode_recap(row: Mapping[str, Any]) -> dict[str, Any]:
    decoded = dict(row)
    for column, default in RECAP_JSON_COLUMNS.items():
        value = loads_or_default(decoded.get(column), default)
        decoded[column] = value if isinstance(value, type(default)) else default
    if decoded.get("id") is not None:
        decoded["id"] = str(decoded["id"])
    return decoded


async def get_recap(recap_id: str) -> dict[str, Any] | None:
    row = await dbfetch("SELECT * FROM recaps WHERE id = $1", recap_id, one=True)
    return _decode_recap(row) if row else None


async def list_recaps(user_id: str, limit: int = 20) -> list[dict[str, Any]]:
    rows = await dbfetch(
        """
        SELECT *
        FROM recaps
        WHERE user_id = $1
        ORDER BY created_at DESC
        LIMIT $2
        """,
        user_id,
        limit,
    )
    return [_decode_recap(row) for row in rows or []]


__all__ = [
    "ENTITY_TABLES",
    "get_goals",
    "get_people",
    "get_recap",
    "get_records_by_user_and_range",
    "get_soul_matrix",
    "get_wheel_of_life",
    "list_recaps",
    "load_snapshot",
    "save_recap",
]
