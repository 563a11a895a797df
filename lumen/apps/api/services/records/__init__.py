"""Record loading and recap persistence backed by Postgres."""

from .store import get_goals, get_recap, get_records_by_user_and_range, list_recaps, load_snapshot, save_recap

__all__ = ["get_goals", "get_recap", "get_records_by_user_and_range", "list_recaps", "load_snapshot", "save_recap"]
