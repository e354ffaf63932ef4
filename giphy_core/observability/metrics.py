from __future__ import annotations

from threading import Lock
from typing import Any

REQUESTS_COUNTER = "giphy.requests"
LATENCY_TIMER = "giphy.latency_ms"

_ALLOWED_LABELS = {"request_type", "outcome", "status"}
_lock = Lock()
_counters: dict[tuple[str, tuple[tuple[str, str], ...]], int] = {}
_timers: dict[tuple[str, tuple[tuple[str, str], ...]], dict[str, float]] = {}


def _label_value(value: Any) -> str:
    # str-Enums render as their value, not "RequestType.SEARCH"
    return str(getattr(value, "value", value))


def _normalize_labels(labels: dict[str, Any] | None) -> tuple[tuple[str, str], ...]:
    if not labels:
        return ()
    return tuple(
        sorted((key, _label_value(value)) for key, value in labels.items() if key in _ALLOWED_LABELS and value is not None)
    )


def _render_key(name: str, labels: tuple[tuple[str, str], ...]) -> str:
    if not labels:
        return name
    joined = ",".join(f"{k}={v}" for k, v in labels)
    return f"{name}{{{joined}}}"


def increment(name: str, value: int = 1, labels: dict[str, Any] | None = None) -> None:
    metric_key = (name, _normalize_labels(labels))
    with _lock:
        _counters[metric_key] = _counters.get(metric_key, 0) + value


def observe_ms(name: str, ms: float, labels: dict[str, Any] | None = None) -> None:
    metric_key = (name, _normalize_labels(labels))
    with _lock:
        current = _timers.setdefault(metric_key, {"count": 0.0, "sum": 0.0, "min": ms, "max": ms})
        current["count"] += 1.0
        current["sum"] += ms
        current["min"] = min(current["min"], ms)
        current["max"] = max(current["max"], ms)


def record_request(request_type: Any, outcome: str, latency_ms: float, status: int | None = None) -> None:
    """Count one finished request and time it per request type."""
    increment(REQUESTS_COUNTER, labels={"request_type": request_type, "outcome": outcome, "status": status})
    observe_ms(LATENCY_TIMER, latency_ms, labels={"request_type": request_type})


def snapshot() -> dict[str, Any]:
    with _lock:
        counters = {_render_key(name, labels): value for (name, labels), value in _counters.items()}
        timers: dict[str, dict[str, float]] = {}
        for (name, labels), values in _timers.items():
            count = values["count"]
            timers[_render_key(name, labels)] = {
                "count": int(count),
                "sum": values["sum"],
                "min": values["min"],
                "max": values["max"],
                "avg": values["sum"] / count if count else 0.0,
            }
    return {"counters": counters, "timers_ms": timers}


def reset() -> None:
    with _lock:
        _counters.clear()
        _timers.clear()
