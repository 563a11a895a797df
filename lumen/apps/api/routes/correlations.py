from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, HTTPException, Query

from lumen.apps.api.core.metrics import engine_latency
from lumen.apps.api.services.records.store import get_records_by_user_and_range
from lumen.apps.engine.correlations.engine import ANALYSIS_TYPES, generate_correlation_analysis
from lumen.libs.schemas.records import AnalyticsInput
from lumen.libs.schemas.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/correlations/{person_id}")
async def correlations(
    person_id: str,
    period: int = Query(30, description="Look-back window in days"),
    analysis_type: str = Query("all", alias="type", description="all, mood, energy, sleep or content"),
):
    if period <= 0:
        raise HTTPException(status_code=400, detail="period must be a positive number of days")
    if analysis_type not in ANALYSIS_TYPES:
        raise HTTPException(status_code=400, detail=f"type must be one of: {', '.join(ANALYSIS_TYPES)}")

    end = datetime.now(timezone.utc)
    start = end - timedelta(days=period)
    limit = get_settings().record_fetch_limit
    try:
        snapshot = AnalyticsInput(
            journal_entries=await get_records_by_user_and_range(person_id, "journal_entries", start, end, limit),
            check_ins=await get_records_by_user_and_range(person_id, "check_ins", start, end, limit),
            start_date=start,
            end_date=end,
        )
        with engine_latency.labels(engine="correlations").time():
            return generate_correlation_analysis(snapshot, analysis_type=analysis_type)
    except Exception as exc:
        logger.exception(
            "correlation analysis failed",
            extra={"event": "correlations_failed", "person_id": person_id},
        )
        raise HTTPException(status_code=500, detail="Internal server error") from exc


__all__ = ["router"]
