from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from lumen.apps.api.core.metrics import engine_latency, recaps_generated
from lumen.apps.api.services.records.store import get_goals, list_recaps, load_snapshot, save_recap
from lumen.apps.engine.recap.cards import generate_recap_cards
from lumen.apps.engine.recap.engine import generate_category_recaps, generate_comprehensive_recap
from lumen.apps.engine.recap.story import generate_story_recap, story_recap_record
from lumen.libs.schemas.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recaps", tags=["recaps"])


class RecapRequest(BaseModel):
    type: str = "weekly"


def recap_window(period: str, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Last 7 days for weekly recaps, otherwise one calendar month back."""
    end = now or datetime.now(timezone.utc)
    if period == "weekly":
        return end - timedelta(days=7), end
    return end - relativedelta(months=1), end


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


@router.get("/{person_id}")
async def category_recaps(
    person_id: str,
    period: str = Query("weekly"),
    start_date: datetime | None = Query(None),
    end_date: datetime | None = Query(None),
) -> list[dict[str, Any]]:
    if start_date and end_date:
        start, end = _aware(start_date), _aware(end_date)
        if start > end:
            raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    else:
        start, end = recap_window(period)

    try:
        snapshot = await load_snapshot(person_id, period=period, start=start, end=end)
        with engine_latency.labels(engine="recap").time():
            return generate_category_recaps(snapshot)
    except Exception as exc:
        logger.exception("recap generation failed", extra={"event": "recaps_failed", "person_id": person_id})
        raise HTTPException(status_code=500, detail="Internal server error") from exc


@router.post("/{person_id}")
async def create_recap(person_id: str, payload: RecapRequest) -> dict[str, Any]:
    start, end = recap_window(payload.type)
    try:
        snapshot = await load_snapshot(person_id, period=payload.type, start=start, end=end)
        with engine_latency.labels(engine="recap").time():
            recap = generate_comprehensive_recap(snapshot)
        recap_id = await save_recap(
            person_id,
            recap_type=payload.type,
            period_start=start,
            period_end=end,
            recap=recap,
        )
    except Exception as exc:
        logger.exception("recap persistence failed", extra={"event": "recap_create_failed", "person_id": person_id})
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    recaps_generated.labels(type=payload.type).inc()
    return {"message": "Recap generated successfully", "recap": {"id": recap_id, **recap}}


@router.post("/{person_id}/generate")
async def create_story_recap(person_id: str, payload: RecapRequest) -> dict[str, Any]:
    start, end = recap_window(payload.type)
    try:
        snapshot = await load_snapshot(person_id, period=payload.type, start=start, end=end)
        with engine_latency.labels(engine="story").time():
            recap = generate_story_recap(snapshot)
        recap_id = await save_recap(
            person_id,
            recap_type=payload.type,
            period_start=start,
            period_end=end,
            recap=story_recap_record(recap),
        )
    except Exception as exc:
        logger.exception("story recap failed", extra={"event": "story_recap_failed", "person_id": person_id})
        raise HTTPException(status_code=500, detail="Internal server error") from exc

    recaps_generated.labels(type=payload.type).inc()
    return {"id": recap_id, "message": f"{payload.type} recap generated successfully", "recap": recap}


@router.get("/{person_id}/cards")
async def recap_cards(person_id: str) -> list[dict[str, Any]]:
    start, end = recap_window("weekly")
    try:
        snapshot = await load_snapshot(person_id, period="weekly", start=start, end=end)
        goals = await get_goals(person_id, get_settings().record_fetch_limit)
        return generate_recap_cards(snapshot.model_copy(update={"goals": goals}))
    except Exception as exc:
        logger.exception("recap cards failed", extra={"event": "recap_cards_failed", "person_id": person_id})
        raise HTTPException(status_code=500, detail="Internal server error") from exc


@router.get("/{person_id}/history")
async def recap_history(person_id: str, limit: int = Query(20, ge=1, le=100)) -> list[dict[str, Any]]:
    try:
        return await list_recaps(person_id, limit)
    except Exception as exc:
        logger.exception("recap history failed", extra={"event": "recap_history_failed", "person_id": person_id})
        raise HTTPException(status_code=500, detail="Internal server error") from exc


__all__ = ["recap_window", "router"]
