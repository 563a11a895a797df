from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest

from lumen.libs.schemas.records import CheckIn, FinanceEntry, Goal, JournalEntry, Person, Task

_ids = itertools.count(1)


def at(year: int, month: int, day: int, hour: int = 12) -> datetime:
    return datetime(year, month, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def entry():
    def _make(content: str = "", when: datetime = None, **extra) -> JournalEntry:
        return JournalEntry(id=f"e{next(_ids)}", created_at=when or at(2024, 3, 6), content=content, **extra)

    return _make


@pytest.fixture
def check_in():
    def _make(mood: str = "neutral", when: datetime = None, **extra) -> CheckIn:
        return CheckIn(id=f"c{next(_ids)}", created_at=when or at(2024, 3, 6), mood=mood, **extra)

    return _make


@pytest.fixture
def goal():
    def _make(status: str = "pending", when: datetime = None, **extra) -> Goal:
        return Goal(id=f"g{next(_ids)}", created_at=when or at(2024, 3, 6), status=status, **extra)

    return _make


@pytest.fixture
def person():
    def _make(name: str, when: datetime = None) -> Person:
        return Person(id=f"p{next(_ids)}", name=name, created_at=when or at(2024, 1, 1))

    return _make


@pytest.fixture
def finance():
    def _make(category: str, amount: float, description: str = "", when: datetime = None) -> FinanceEntry:
        return FinanceEntry(
            id=f"f{next(_ids)}",
            date=when or at(2024, 3, 6),
            category=category,
            amount=amount,
            description=description,
        )

    return _make


@pytest.fixture
def task():
    def _make(status: str = "pending", when: datetime = None) -> Task:
        return Task(id=f"t{next(_ids)}", created_at=when or at(2024, 3, 6), status=status)

    return _make
