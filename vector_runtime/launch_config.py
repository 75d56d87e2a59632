"""Launch geometry for grid-stride kernels."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LaunchConfig:
    """Constants controlling how bulk element operations are partitioned."""
    name: str = "default"
    block_size: int = 256
    max_grid: int = 65535
    host_workers: int = 8


DEFAULT_LAUNCH = LaunchConfig()


def grid_size(n: int, config: LaunchConfig = DEFAULT_LAUNCH) -> int:
    """Number of blocks for n elements, capped at max_grid (at least 1).

    Capping is safe because kernels loop grid-stride over the remainder.
    """
    blocks = (n + config.block_size - 1) // config.block_size
    return max(1, min(blocks, config.max_grid))


def grid_stride_ranges(n: int, workers: int) -> list[range]:
    """Partition logical indices 0..n across workers, grid-stride style.

    Worker w handles w, w + workers, w + 2*workers, ... Workers with no
    indices are omitted, so the result is empty for n == 0.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    return [range(w, n, workers) for w in range(min(workers, n))]
