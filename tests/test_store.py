import json

import pytest

from conftest import at
from lumen.apps.api.services.records import store


@pytest.mark.asyncio
async def test_range_query_returns_oldest_first(monkeypatch):
    calls = []

    async def fake_q(sql, *args, **kwargs):
        calls.append((sql, args))
        return [
            {"id": 2, "user_id": "u1", "created_at": at(2024, 3, 5), "content": "later", "transcription": None},
            {"id": 1, "user_id": "u1", "created_at": at(2024, 3, 2), "content": None, "transcription": "spoken"},
        ]

    monkeypatch.setattr(store, "dbfetch", fake_q)

    entries = await store.get_records_by_user_and_range("u1", "journal_entries", at(2024, 3, 1), at(2024, 3, 8), 50)

    assert [e.id for e in entries] == ["1", "2"]
    assert entries[0].text == "spoken"
    sql, args = calls[0]
    assert "FROM journal_entries" in sql
    assert "ORDER BY created_at DESC" in sql
    assert args == ("u1", at(2024, 3, 1), at(2024, 3, 8), 50)


@pytest.mark.asyncio
async def test_finance_window_uses_date_column(monkeypatch):
    captured = {}

    async def fake_q(sql, *args, **kwargs):
        captured["sql"] = sql
        return [{"id": "f1", "date": at(2024, 3, 3), "category": "income", "amount": 12.5, "description": None}]

    monkeypatch.setattr(store, "dbfetch", fake_q)

    rows = await store.get_records_by_user_and_range("u1", "finance_entries", at(2024, 3, 1), at(2024, 3, 8))

    assert "date >= $2 AND date <= $3" in captured["sql"]
    assert rows[0].amount == 12.5
    assert rows[0].description == ""


@pytest.mark.asyncio
async def test_unknown_entity_type_is_rejected():
    with pytest.raises(ValueError, match="Unknown entity type"):
        await store.get_records_by_user_and_range("u1", "dreams", at(2024, 3, 1), at(2024, 3, 8))


@pytest.mark.asyncio
async def test_goals_are_fetched_without_a_window(monkeypatch):
    calls = []

    async def fake_q(sql, *args, **kwargs):
        calls.append((sql, args))
        return [
            {"id": "g1", "created_at": at(2023, 6, 1), "status": "completed", "progress": None},
            {"id": "g2", "created_at": at(2024, 3, 4), "status": "in-progress", "progress": 40},
        ]

    monkeypatch.setattr(store, "dbfetch", fake_q)

    goals = await store.get_goals("u1", limit=25)

    assert [g.id for g in goals] == ["g1", "g2"]
    assert goals[0].progress == 0.0
    sql, args = calls[0]
    assert "FROM goals" in sql
    assert "created_at >=" not in sql
    assert args == ("u1", 25)


@pytest.mark.asyncio
async def test_load_snapshot_collects_every_source(monkeypatch):
    async def fake_q(sql, *args, **kwargs):
        if "FROM check_ins" in sql:
            return [{"id": "c1", "created_at": at(2024, 3, 4), "mood": "happy", "energy": "High", "sleep_hours": 7}]
        if "FROM people" in sql:
            return [{"id": "p1", "name": "Alice", "created_at": at(2023, 12, 1)}]
        if "FROM soul_matrix" in sql:
            return {"traits": json.dumps({"curious": 0.8})}
        if "FROM wheel_of_life" in sql:
            return None
        return []

    monkeypatch.setattr(store, "dbfetch", fake_q)

    snapshot = await store.load_snapshot("u1", period="weekly", start=at(2024, 3, 1), end=at(2024, 3, 8))

    assert snapshot.check_ins[0].mood == "happy"
    assert snapshot.people[0].name == "Alice"
    assert snapshot.soul_matrix.trait_map() == {"curious": 0.8}
    assert snapshot.wheel_of_life is None
    assert snapshot.journal_entries == []
    assert snapshot.period == "weekly"


@pytest.mark.asyncio
async def test_saved_recap_reads_back(monkeypatch):
    table = {}

    # Stand-ins for the pool's jsonb codec: json.dumps going in, json.loads coming out.
    async def fake_exec(sql, *args):
        recap_id, user_id, recap_type, start, end, content, *payload, created = args
        insights, recs, areas, metrics = (json.dumps(value) for value in payload)
        table[recap_id] = {
            "id": recap_id,
            "user_id": user_id,
            "type": recap_type,
            "period_start": start,
            "period_end": end,
            "content": content,
            "insights": insights,
            "recommendations": recs,
            "life_area_improvements": areas,
            "metrics": metrics,
            "created_at": created,
        }

    async def fake_q(sql, *args, one=False):
        row = table.get(args[0])
        decoded = {
            **row,
            **{column: json.loads(row[column]) for column in store.RECAP_JSON_COLUMNS},
        }
        return decoded if one else [decoded]

    monkeypatch.setattr(store, "dbexec", fake_exec)
    monkeypatch.setattr(store, "dbfetch", fake_q)

    recap = {
        "content": "A calm week.",
        "insights": ["Mood steady"],
        "recommendations": ["Keep journaling"],
        "life_area_improvements": [{"area": "Wellness & Mood", "improvement": "Improving"}],
        "metrics": {"total_categories": 6, "improving_areas": 2, "areas_needing_attention": 0},
    }
    recap_id = await store.save_recap(
        "u1",
        recap_type="weekly",
        period_start=at(2024, 3, 1),
        period_end=at(2024, 3, 8),
        recap=recap,
    )

    stored = await store.get_recap(recap_id)
    assert stored["content"] == "A calm week."
    assert stored["type"] == "weekly"
    assert stored["insights"] == ["Mood steady"]
    assert stored["life_area_improvements"][0]["improvement"] == "Improving"
    assert stored["metrics"]["improving_areas"] == 2


@pytest.mark.asyncio
async def test_history_tolerates_malformed_json(monkeypatch):
    async def fake_q(sql, *args, **kwargs):
        assert args == ("u1", 5)
        return [{"id": "r1", "content": "x", "insights": "not json", "metrics": None}]

    monkeypatch.setattr(store, "dbfetch", fake_q)

    history = await store.list_recaps("u1", limit=5)

    assert history[0]["insights"] == []
    assert history[0]["metrics"] == {}
    assert history[0]["recommendations"] == []


@pytest.mark.asyncio
async def test_missing_recap_is_none(monkeypatch):
    async def fake_q(sql, *args, **kwargs):
        return None

    monkeypatch.setattr(store, "dbfetch", fake_q)

    assert await store.get_recap("missing") is None
