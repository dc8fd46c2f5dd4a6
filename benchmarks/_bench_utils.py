"""Shared benchmark runtime helpers."""

from __future__ import annotations

import os
import platform
import statistics
import sys
import time
from typing import Any, Callable

import jax


def host_metadata() -> dict[str, Any]:
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "jax": getattr(jax, "__version__", "unknown"),
        "cpu_count": os.cpu_count(),
        "recursion_limit": sys.getrecursionlimit(),
    }


def sample_ms(fn: Callable[[], object], *, warmup: int, samples: int) -> list[float]:
    for _ in range(max(0, warmup)):
        fn()
    rows: list[float] = []
    for _ in range(samples):
        start_ns = time.perf_counter_ns()
        fn()
        rows.append((time.perf_counter_ns() - start_ns) / 1e6)
    return rows


def summarize_ms(timings: list[float]) -> dict[str, float]:
    """Mean, sample stdev and nearest-rank p50/p95 of a non-empty timing list."""
    ordered = sorted(timings)
    last = len(ordered) - 1
    return {
        "mean_ms": statistics.fmean(ordered),
        "stdev_ms": statistics.stdev(ordered) if last else 0.0,
        "p50_ms": ordered[round(0.5 * last)],
        "p95_ms": ordered[round(0.95 * last)],
    }
