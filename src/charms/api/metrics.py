from __future__ import annotations

import threading
import time
from typing import Dict

# Process-level HTTP counters. The verification engine itself never touches
# these; only the API layer increments them.
_lock = threading.Lock()
_counters: Dict[str, int] = {}
_started_ms = int(time.time() * 1000)


def inc_counter(name: str, value: int = 1) -> None:
    n = str(name or "").strip()
    if not n:
        return
    with _lock:
        _counters[n] = int(_counters.get(n, 0)) + int(value)


def snapshot() -> dict:
    with _lock:
        now = int(time.time() * 1000)
        return {
            "ts_ms": now,
            "started_ms": int(_started_ms),
            "uptime_ms": now - int(_started_ms),
            "counters": dict(_counters),
        }


def reset() -> None:
    with _lock:
        _counters.clear()


def format_prometheus(prefix: str = "charms_") -> str:
    """Prometheus exposition text: integer counters only."""
    pre = str(prefix or "").strip() or "charms_"
    snap = snapshot()
    lines: list[str] = [f"{pre}uptime_ms {int(snap['uptime_ms'])}"]
    counters = snap["counters"]
    for k in sorted(counters.keys()):
        lines.append(f"{pre}{k} {int(counters[k])}")
    return "\n".join(lines) + "\n"
