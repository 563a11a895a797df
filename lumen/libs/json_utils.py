from __future__ import annotations

import json
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any


def json_safe(obj: Any) -> Any:
    """Recursively convert UUIDs, datetimes and decimals into JSON-serializable values."""

    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, dict):
        return {k: json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [json_safe(item) for item in obj]
    return obj


def loads_or_default(blob: Any, default: Any) -> Any:
    """Decode a JSON text column, falling back to ``default`` when empty or malformed."""

    if blob is None or blob == "":
        return default
    if not isinstance(blob, (str, bytes, bytearray)):
        return blob
    try:
        return json.loads(blob)
    except (TypeError, ValueError):
        return default


def dumps(obj: Any) -> str:
    return json.dumps(json_safe(obj), ensure_ascii=False)


def render_json(content: Any) -> bytes:
    """Response body encoder installed on ``JSONResponse``."""
    return dumps(content).encode("utf-8")


__all__ = ["dumps", "json_safe", "loads_or_default", "render_json"]
