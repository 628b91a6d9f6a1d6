from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

LabelDict = Mapping[str, str]
LabelKey = tuple[tuple[str, str], ...]


def _labels_key(labels: LabelDict | None) -> LabelKey:
    if not labels:
        return ()
    return tuple(sorted(labels.items()))


def _render_labels(key: LabelKey) -> str:
    if not key:
        return ""
    return "{" + ",".join(f'{k}="{v}"' for k, v in key) + "}"


@dataclass
class Counter:
    name: str
    help: str
    _values: dict[LabelKey, int] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def inc(self, labels: LabelDict | None = None, value: int = 1) -> None:
        key = _labels_key(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0) + value

    def value(self, labels: LabelDict | None = None) -> int:
        return self._values.get(_labels_key(labels), 0)

    def render_prometheus(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} counter"]
        for key, val in self._values.items():
            lines.append(f"{self.name}{_render_labels(key)} {val}")
        return lines


@dataclass
class Summary:
    name: str
    help: str
    # label key -> (count, sum)
    _values: dict[LabelKey, tuple[int, float]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def observe(self, value: float, labels: LabelDict | None = None) -> None:
        key = _labels_key(labels)
        with self._lock:
            count, total = self._values.get(key, (0, 0.0))
            self._values[key] = (count + 1, total + value)

    def count(self, labels: LabelDict | None = None) -> int:
        return self._values.get(_labels_key(labels), (0, 0.0))[0]

    def render_prometheus(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} summary"]
        for key, (count, total) in self._values.items():
            label_str = _render_labels(key)
            lines.append(f"{self.name}_count{label_str} {count}")
            lines.append(f"{self.name}_sum{label_str} {total}")
        return lines


# ---- Global metrics we care about ----

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests received by the API.",
)

HTTP_LATENCY = Summary(
    "http_request_duration_seconds",
    "Latencies for HTTP requests.",
)

SESSIONS_CREATED = Counter(
    "sessions_created_total",
    "Session records stored after a successful ingestion.",
)

SESSIONS_FAILED = Counter(
    "sessions_failed_total",
    "Ingestion attempts that ended without a stored record.",
)

STAGE_LATENCY = Summary(
    "pipeline_stage_duration_seconds",
    "Latencies of individual ingestion stages.",
)

STAGE_DEGRADED = Counter(
    "pipeline_stage_degraded_total",
    "Best-effort stages that fell back to defaults.",
)


@contextmanager
def track_http_request(
    path: str,
    method: str,
    status_getter: Callable[[], int],
) -> Any:
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        status = str(status_getter())
        labels = {"path": path, "method": method, "status": status}
        HTTP_REQUESTS.inc(labels)
        HTTP_LATENCY.observe(duration, labels)


@contextmanager
def track_stage(stage: str) -> Any:
    start = time.perf_counter()
    try:
        yield
    finally:
        STAGE_LATENCY.observe(time.perf_counter() - start, {"stage": stage})


def render_all_metrics_prometheus() -> str:
    """Render all metrics in a tiny Prometheus-compatible text format."""
    lines: list[str] = []
    for metric in (
        HTTP_REQUESTS,
        HTTP_LATENCY,
        SESSIONS_CREATED,
        SESSIONS_FAILED,
        STAGE_LATENCY,
        STAGE_DEGRADED,
    ):
        lines.extend(metric.render_prometheus())
        lines.append("")
    return "\n".join(lines).strip() + "\n"
