import json
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from lumen.apps.api.main import app
from lumen.apps.api.routes.recaps import recap_window
from lumen.libs.schemas.records import AnalyticsInput, CheckIn, Goal, JournalEntry


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def _recent(days_ago: int) -> datetime:
    return datetime.now(timezone.utc) - timedelta(days=days_ago)


@pytest.mark.asyncio
async def test_health_endpoint():
    async with _client() as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "X-Response-Time-ms" in response.headers


@pytest.mark.asyncio
async def test_personality_evolution_endpoint(monkeypatch):
    seen = []

    async def fake_records(user_id, entity_type, start, end, limit=1000):
        seen.append((user_id, entity_type, (end - start).days))
        if entity_type == "journal_entries":
            return [
                JournalEntry(id="e1", created_at=_recent(3), content="Met a friend at a party"),
                JournalEntry(id="e2", created_at=_recent(1), content="Started a new job today"),
            ]
        return [CheckIn(id="c1", created_at=_recent(1), mood="7", energy=6)]

    monkeypatch.setattr("lumen.apps.api.routes.personality_evolution.get_records_by_user_and_range", fake_records)

    async with _client() as client:
        response = await client.get(
            "/analytics/personality_evolution/u1", params={"period": 30, "granularity": "daily"}
        )

    assert response.status_code == 200
    body = response.json()
    assert body["period"] == 30
    assert body["granularity"] == "daily"
    assert len(body["timeline"]) == 2
    assert [event["type"] for event in body["life_events"]] == ["career"]
    assert set(body["stability_metrics"]) == {"overall_stability", "trait_stability", "growth_rate", "adaptation_score"}
    assert seen == [("u1", "journal_entries", 30), ("u1", "check_ins", 30)]


@pytest.mark.asyncio
async def test_personality_evolution_rejects_non_positive_period():
    async with _client() as client:
        response = await client.get("/analytics/personality_evolution/u1", params={"period": 0})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_personality_evolution_reports_store_failures(monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr("lumen.apps.api.routes.personality_evolution.get_records_by_user_and_range", broken)

    async with _client() as client:
        response = await client.get("/analytics/personality_evolution/u1")

    assert response.status_code == 500
    assert response.json() == {"detail": "Unable to compute personality evolution"}


@pytest.mark.asyncio
async def test_category_recaps_endpoint(monkeypatch):
    captured = {}

    async def fake_snapshot(user_id, *, period, start, end):
        captured.update(period=period, start=start, end=end)
        return AnalyticsInput(period=period, start_date=start, end_date=end)

    monkeypatch.setattr("lumen.apps.api.routes.recaps.load_snapshot", fake_snapshot)

    async with _client() as client:
        response = await client.get(
            "/recaps/u1",
            params={"period": "monthly", "start_date": "2024-03-01T00:00:00", "end_date": "2024-03-31T00:00:00"},
        )

    assert response.status_code == 200
    recaps = response.json()
    assert [r["category"] for r in recaps] == [
        "wellness", "journal", "life-areas", "relationships", "productivity", "growth",
    ]
    assert captured["period"] == "monthly"
    assert captured["start"] == datetime(2024, 3, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_category_recaps_rejects_inverted_range():
    async with _client() as client:
        response = await client.get(
            "/recaps/u1",
            params={"start_date": "2024-03-31T00:00:00", "end_date": "2024-03-01T00:00:00"},
        )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_recap_persists_comprehensive_recap(monkeypatch):
    saved = {}

    async def fake_snapshot(user_id, *, period, start, end):
        return AnalyticsInput(period=period, start_date=start, end_date=end)

    async def fake_save(user_id, *, recap_type, period_start, period_end, recap):
        saved.update(user_id=user_id, recap_type=recap_type, days=(period_end - period_start).days, recap=recap)
        return "recap-1"

    monkeypatch.setattr("lumen.apps.api.routes.recaps.load_snapshot", fake_snapshot)
    monkeypatch.setattr("lumen.apps.api.routes.recaps.save_recap", fake_save)

    async with _client() as client:
        response = await client.post("/recaps/u1", json={"type": "weekly"})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Recap generated successfully"
    assert body["recap"]["id"] == "recap-1"
    assert body["recap"]["metrics"]["total_categories"] == 6
    assert saved["recap_type"] == "weekly"
    assert saved["days"] == 7


@pytest.mark.asyncio
async def test_create_recap_failure_is_internal_error(monkeypatch):
    async def fake_snapshot(user_id, *, period, start, end):
        return AnalyticsInput(period=period, start_date=start, end_date=end)

    async def failing_save(*args, **kwargs):
        raise RuntimeError("insert failed")

    monkeypatch.setattr("lumen.apps.api.routes.recaps.load_snapshot", fake_snapshot)
    monkeypatch.setattr("lumen.apps.api.routes.recaps.save_recap", failing_save)

    async with _client() as client:
        response = await client.post("/recaps/u1", json={"type": "monthly"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_recap_cards_endpoint(monkeypatch):
    async def fake_snapshot(user_id, *, period, start, end):
        return AnalyticsInput(
            period=period,
            check_ins=[CheckIn(id="c1", created_at=_recent(2), mood="happy")],
            start_date=start,
            end_date=end,
        )

    async def no_goals(user_id, limit):
        return []

    monkeypatch.setattr("lumen.apps.api.routes.recaps.load_snapshot", fake_snapshot)
    monkeypatch.setattr("lumen.apps.api.routes.recaps.get_goals", no_goals)

    async with _client() as client:
        response = await client.get("/recaps/u1/cards")

    assert response.status_code == 200
    cards = response.json()
    assert [card["id"] for card in cards] == ["mood-card"]
    assert cards[0]["title"] == "Your mood was mostly happy this week"


@pytest.mark.asyncio
async def test_recap_cards_count_goals_outside_the_week(monkeypatch):
    async def fake_snapshot(user_id, *, period, start, end):
        recent = Goal(id="g1", created_at=_recent(1), status="completed")
        return AnalyticsInput(period=period, goals=[recent], start_date=start, end_date=end)

    async def all_goals(user_id, limit):
        return [
            Goal(id="g0", created_at=_recent(90), status="completed"),
            Goal(id="g1", created_at=_recent(1), status="completed"),
            Goal(id="g2", created_at=_recent(40), status="pending"),
        ]

    monkeypatch.setattr("lumen.apps.api.routes.recaps.load_snapshot", fake_snapshot)
    monkeypatch.setattr("lumen.apps.api.routes.recaps.get_goals", all_goals)

    async with _client() as client:
        response = await client.get("/recaps/u1/cards")

    assert response.status_code == 200
    goals_card = next(card for card in response.json() if card["id"] == "goals-card")
    assert goals_card["data"]["total_goals"] == 3
    assert goals_card["data"]["completed_goals"] == 2
    assert goals_card["title"] == "You completed 0 tasks and 2 goals"


@pytest.mark.asyncio
async def test_recap_history_endpoint(monkeypatch):
    async def fake_list(user_id, limit):
        return [{"id": "r1", "type": "weekly", "limit": limit}]

    monkeypatch.setattr("lumen.apps.api.routes.recaps.list_recaps", fake_list)

    async with _client() as client:
        response = await client.get("/recaps/u1/history", params={"limit": 5})
        too_many = await client.get("/recaps/u1/history", params={"limit": 500})

    assert response.status_code == 200
    assert response.json() == [{"id": "r1", "type": "weekly", "limit": 5}]
    assert too_many.status_code == 422


def test_recap_window_lengths():
    now = datetime(2024, 3, 31, 9, tzinfo=timezone.utc)
    assert recap_window("weekly", now) == (datetime(2024, 3, 24, 9, tzinfo=timezone.utc), now)
    assert recap_window("monthly", now)[0] == datetime(2024, 2, 29, 9, tzinfo=timezone.utc)
    assert recap_window("yearly", now)[0] == datetime(2024, 2, 29, 9, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_correlations_endpoint(monkeypatch):
    seen = []
    moment = _recent(1)

    async def fake_records(user_id, entity_type, start, end, limit=1000):
        seen.append((entity_type, (end - start).days))
        if entity_type == "journal_entries":
            return [JournalEntry(id="e1", created_at=moment, content="A good day at work")]
        return [CheckIn(id="c1", created_at=moment, mood="😊", energy=8, sleep_hours=7)]

    monkeypatch.setattr("lumen.apps.api.routes.correlations.get_records_by_user_and_range", fake_records)

    async with _client() as client:
        response = await client.get("/analytics/correlations/u1", params={"period": 14, "type": "mood"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {
        "mood_correlations", "energy_correlations", "sleep_correlations", "content_patterns", "trends", "insights",
    }
    assert len(body["mood_correlations"]) == 1
    assert body["mood_correlations"][0]["date"] == moment.date().isoformat()
    assert body["energy_correlations"] == []
    assert [i["title"] for i in body["insights"]] == ["Positive Mood Trend"]
    assert seen == [("journal_entries", 14), ("check_ins", 14)]


@pytest.mark.asyncio
async def test_correlations_rejects_bad_parameters():
    async with _client() as client:
        bad_period = await client.get("/analytics/correlations/u1", params={"period": 0})
        bad_type = await client.get("/analytics/correlations/u1", params={"type": "dreams"})

    assert bad_period.status_code == 400
    assert bad_type.status_code == 400


@pytest.mark.asyncio
async def test_correlations_store_failure_is_internal_error(monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr("lumen.apps.api.routes.correlations.get_records_by_user_and_range", broken)

    async with _client() as client:
        response = await client.get("/analytics/correlations/u1")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}


@pytest.mark.asyncio
async def test_story_recap_is_generated_and_saved(monkeypatch):
    saved = {}

    async def fake_snapshot(user_id, *, period, start, end):
        return AnalyticsInput(period=period, start_date=start, end_date=end)

    async def fake_save(user_id, *, recap_type, period_start, period_end, recap):
        saved.update(recap_type=recap_type, days=(period_end - period_start).days, recap=recap)
        return "story-1"

    monkeypatch.setattr("lumen.apps.api.routes.recaps.load_snapshot", fake_snapshot)
    monkeypatch.setattr("lumen.apps.api.routes.recaps.save_recap", fake_save)

    async with _client() as client:
        response = await client.post("/recaps/u1/generate", json={"type": "weekly"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "story-1"
    assert body["message"] == "weekly recap generated successfully"
    assert body["recap"]["title"].startswith("Week of ")
    assert set(body["recap"]["story"]) == {"narrative", "timeline", "character", "journey", "reflection"}
    assert saved["recap_type"] == "weekly"
    assert saved["days"] == 7
    assert saved["recap"]["metrics"] == {}
    assert json.loads(saved["recap"]["content"])["title"] == body["recap"]["title"]
