from __future__ import annotations

from prometheus_client import Counter, Histogram

recaps_generated = Counter("lumen_recaps_generated_total", "Comprehensive recaps persisted", ["type"])
engine_latency = Histogram("lumen_engine_seconds", "Analytics engine run time in seconds", ["engine"])
