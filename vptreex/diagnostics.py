"""Per-operation resource logging.

Every public build/query entry point wraps its work in :func:`log_operation`,
which emits a single INFO record of the form::

    op=knn_query status=ok wall_ms=1.234 cpu_user_ms=1.100 rss_delta=0 queries=2 k=3

CPU and RSS sampling can be switched off with ``VPTREEX_ENABLE_DIAGNOSTICS=0``;
the fields are then reported as ``NA``.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator

from vptreex import config as vx_config

try:  # pragma: no cover - platform specific fallback
    import resource
except ImportError:  # pragma: no cover - Windows fallback
    resource = None  # type: ignore


def _read_rss_bytes() -> int | None:
    try:
        with open("/proc/self/statm", "r", encoding="utf-8") as handle:
            contents = handle.readline().strip().split()
        if len(contents) >= 2:
            return int(contents[1]) * os.sysconf("SC_PAGE_SIZE")
    except (OSError, ValueError, AttributeError):
        pass
    if resource is None:  # pragma: no cover - Windows fallback
        return None
    usage = resource.getrusage(resource.RUSAGE_SELF)
    if getattr(usage, "ru_maxrss", 0):
        return int(usage.ru_maxrss * 1024)
    return None


def _cpu_user_seconds() -> float | None:
    if resource is None:  # pragma: no cover - Windows fallback
        return None
    return float(resource.getrusage(resource.RUSAGE_SELF).ru_utime)


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


@dataclass
class OperationMetrics:
    """Mutable record collected while an operation runs."""

    name: str
    sample_resources: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    status: str = "ok"
    wall_ms: float | None = None
    cpu_user_ms: float | None = None
    rss_delta: int | None = None

    def add_metadata(self, **values: Any) -> None:
        self.metadata.update(values)

    def format(self) -> str:
        parts = [
            f"op={self.name}",
            f"status={self.status}",
            f"wall_ms={_format_value(self.wall_ms)}",
            f"cpu_user_ms={'NA' if self.cpu_user_ms is None else _format_value(self.cpu_user_ms)}",
            f"rss_delta={'NA' if self.rss_delta is None else self.rss_delta}",
        ]
        parts.extend(f"{key}={_format_value(value)}" for key, value in self.metadata.items())
        return " ".join(parts)


@contextmanager
def log_operation(logger: logging.Logger, name: str) -> Iterator[OperationMetrics]:
    runtime = vx_config.runtime_config()
    metrics = OperationMetrics(name=name, sample_resources=runtime.enable_diagnostics)

    cpu_start = _cpu_user_seconds() if metrics.sample_resources else None
    rss_start = _read_rss_bytes() if metrics.sample_resources else None
    wall_start = time.perf_counter()
    try:
        yield metrics
    except BaseException:
        metrics.status = "error"
        raise
    finally:
        metrics.wall_ms = (time.perf_counter() - wall_start) * 1e3
        if cpu_start is not None:
            cpu_end = _cpu_user_seconds()
            if cpu_end is not None:
                metrics.cpu_user_ms = (cpu_end - cpu_start) * 1e3
        if rss_start is not None:
            rss_end = _read_rss_bytes()
            if rss_end is not None:
                metrics.rss_delta = rss_end - rss_start
        logger.info(metrics.format())


__all__ = ["OperationMetrics", "log_operation"]
