"""Profiler: measure vector operation time on a backend."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

from vector_runtime.backend import Backend


@dataclass
class ProfileResult:
    """Profiling result with timing and iteration count."""
    total_ms: float
    iterations: int


def profile(
    operation: Callable[[], object],
    backend: Backend,
    warmup: int = 3,
    iterations: int = 10,
) -> ProfileResult:
    """Profile a vector operation.

    Runs warmup iterations then measures average execution time. The
    backend is synchronized before the clock stops, so asynchronously
    queued device work is included.
    """
    # Warmup
    for _ in range(warmup):
        operation()
    backend.synchronize()

    # Measure
    start = time.perf_counter()
    for _ in range(iterations):
        operation()
    backend.synchronize()
    end = time.perf_counter()

    total_ms = (end - start) / iterations * 1000

    return ProfileResult(
        total_ms=total_ms,
        iterations=iterations,
    )
