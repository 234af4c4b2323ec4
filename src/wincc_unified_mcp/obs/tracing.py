"""In-memory tracing of tool invocations."""

from __future__ import annotations

import time
import uuid
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone

from wincc_unified_mcp.types import ToolTrace


@dataclass(slots=True)
class TraceRecord:
    trace_id: str
    timestamp_utc: str
    trace: ToolTrace

    @property
    def failed(self) -> bool:
        return self.trace.error is not None


class TraceStore:
    """Bounded trace storage for API-level observability.

    `record` has the observer signature expected by
    `ToolRegistry.set_observer`.
    """

    def __init__(self, *, max_records: int = 1000) -> None:
        self._records: deque[TraceRecord] = deque(maxlen=max_records)

    def record(self, trace: ToolTrace) -> TraceRecord:
        record = TraceRecord(
            trace_id=str(uuid.uuid4()),
            timestamp_utc=datetime.now(timezone.utc).isoformat(),
            trace=trace,
        )
        self._records.append(record)
        return record

    def get(self, trace_id: str) -> TraceRecord:
        for record in self._records:
            if record.trace_id == trace_id:
                return record
        raise KeyError(f"Trace not found: {trace_id}")

    def list_recent(self, limit: int = 20) -> list[TraceRecord]:
        if limit <= 0:
            return []
        return list(self._records)[-limit:]

    def summary(self) -> dict[str, float | int]:
        """Aggregate invocation metrics for dashboard display."""
        records = list(self._records)
        total = len(records)
        if total == 0:
            return {
                "total_requests": 0,
                "failed_requests": 0,
                "avg_latency_ms": 0.0,
                "p95_latency_ms": 0.0,
            }

        latencies = sorted(record.trace.latency_ms for record in records)
        p95_index = max(0, int((len(latencies) * 0.95) - 1))
        return {
            "total_requests": total,
            "failed_requests": sum(1 for record in records if record.failed),
            "avg_latency_ms": sum(latencies) / total,
            "p95_latency_ms": latencies[p95_index],
        }


class Timer:
    """Simple context timer."""

    def __init__(self) -> None:
        self._start = 0.0
        self.elapsed_ms = 0.0

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
