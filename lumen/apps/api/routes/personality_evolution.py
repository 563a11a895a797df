from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, HTTPException, Query

from lumen.apps.api.core.metrics import engine_latency
from lumen.apps.api.services.records.store import get_records_by_user_and_range
from lumen.apps.engine.evolution.engine import generate_personality_evolution
from lumen.libs.schemas.records import AnalyticsInput
from lumen.libs.schemas.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/personality_evolution/{person_id}")
async def personality_evolution(
    person_id: str,
    period: int | None = Query(None, description="Look-back window in days"),
    granularity: str | None = Query(None, description="weekly, monthly or daily"),
):
    settings = get_settings()
    days = period if period is not None else settings.default_evolution_period_days
    if days <= 0:
        raise HTTPException(status_code=400, detail="period must be a positive number of days")
    bucket = granularity or settings.default_granularity

    end = datetime.now(timezone.utc)
    start = end - timedelta(days=days)
    limit = settings.record_fetch_limit
    try:
        snapshot = AnalyticsInput(
            journal_entries=await get_records_by_user_and_range(person_id, "journal_entries", start, end, limit),
            check_ins=await get_records_by_user_and_range(person_id, "check_ins", start, end, limit),
            start_date=start,
            end_date=end,
        )
        with engine_latency.labels(engine="evolution").time():
            return generate_personality_evolution(snapshot, granularity=bucket, period=days)
    except Exception as exc:
        logger.exception(
            "personality evolution failed",
            extra={"event": "personality_evolution_failed", "person_id": person_id},
        )
        raise HTTPException(status_code=500, detail="Unable to compute personality evolution") from exc


__all__ = ["router"]
