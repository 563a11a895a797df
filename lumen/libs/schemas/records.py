"""Typed journal records consumed by the analytics engines.

Rows coming out of the store are validated here once; the engines can then
rely on every field being present (or explicitly ``None``) and on every
timestamp being timezone-aware.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Annotated

from lumen.libs.json_utils import loads_or_default


def _date_to_datetime(value: Any) -> Any:
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


def _assume_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


AwareDatetime = Annotated[datetime, BeforeValidator(_date_to_datetime), AfterValidator(_assume_utc)]


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # NULL columns fall back to field defaults.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)


class JournalEntry(_Record):
    created_at: AwareDatetime
    content: str | None = None
    transcription: str | None = None
    audio_url: str | None = None
    processing_status: str | None = None
    processing_type: str | None = None

    @property
    def text(self) -> str:
        return self.content or self.transcription or ""


class CheckIn(_Record):
    created_at: AwareDatetime
    mood: str = ""
    energy: float | str | None = None
    sleep_hours: float | None = None
    sleep_minutes: float | None = None

    @field_validator("mood", mode="before")
    @classmethod
    def _mood_as_text(cls, value: Any) -> str:
        return "" if value is None else str(value)


class Goal(_Record):
    created_at: AwareDatetime
    target_date: AwareDatetime | None = None
    status: str = "pending"
    life_area_id: str | None = None
    progress: float = 0.0
    updated_at: AwareDatetime | None = None

    @field_validator("life_area_id", mode="before")
    @classmethod
    def _stringify_area(cls, value: Any) -> str | None:
        return None if value is None else str(value)


class Person(_Record):
    name: str
    created_at: AwareDatetime


class FinanceEntry(_Record):
    date: AwareDatetime
    category: str
    amount: float = 0.0
    description: str = ""


class Task(_Record):
    created_at: AwareDatetime
    status: str = "pending"


class SoulMatrix(BaseModel):
    model_config = ConfigDict(extra="ignore")

    traits: dict[str, Any] | str | None = None

    def trait_map(self) -> dict[str, Any] | None:
        """Decoded traits, or ``None`` when the payload cannot be parsed."""
        if isinstance(self.traits, dict):
            return self.traits
        decoded = loads_or_default(self.traits, None)
        return decoded if isinstance(decoded, dict) else None


class WheelOfLife(BaseModel):
    model_config = ConfigDict(extra="ignore")

    life_areas: dict[str, Any] | str | None = None

    def area_scores(self) -> dict[str, Any] | None:
        if isinstance(self.life_areas, dict):
            return self.life_areas
        decoded = loads_or_default(self.life_areas, None)
        return decoded if isinstance(decoded, dict) else None


class AnalyticsInput(BaseModel):
    """In-memory snapshot of one user's records for a reporting window."""

    journal_entries: list[JournalEntry] = Field(default_factory=list)
    check_ins: list[CheckIn] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    people: list[Person] = Field(default_factory=list)
    finance_entries: list[FinanceEntry] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    soul_matrix: SoulMatrix | None = None
    wheel_of_life: WheelOfLife | None = None
    period: str = "weekly"
    start_date: AwareDatetime
    end_date: AwareDatetime


__all__ = [
    "AnalyticsInput",
    "AwareDatetime",
    "CheckIn",
    "FinanceEntry",
    "Goal",
    "JournalEntry",
    "Person",
    "SoulMatrix",
    "Task",
    "WheelOfLife",
]
