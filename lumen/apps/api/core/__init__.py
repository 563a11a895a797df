from __future__ import annotations

from .db import close_pool, exec, get_pool, q

__all__ = ["close_pool", "exec", "get_pool", "q"]
