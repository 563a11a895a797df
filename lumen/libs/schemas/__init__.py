"""Pydantic models and schema utilities."""

from .records import (
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
from .settings import AppSettings, get_settings

__all__ = [
    "AnalyticsInput",
    "AppSettings",
    "CheckIn",
    "FinanceEntry",
    "Goal",
    "JournalEntry",
    "Person",
    "SoulMatrix",
    "Task",
    "WheelOfLife",
    "get_settings",
]
