"""Example: exercise vector fill, transforms, slicing and printing.

Usage:
    python examples/vector_demo.py [--backend cuda|host] [--size N] [--verbose]
"""

import argparse
import logging

import numpy as np

from vector_runtime import Vector, allocate, get_backend, print_vector
from vector_runtime.profiler import profile


def run_demo(backend_name: str | None = None, size: int = 1 << 20):
    backend = get_backend(backend_name)
    print(f"Backend: {backend.name}")

    # 1. Fill and scale
    with allocate(5, backend=backend) as v:
        v.fill(2.0)
        v.scale(3.0)
        print_vector(v)

    # 2. Elementwise multiply
    a = Vector.from_numpy(np.array([1.0, 2.0, 3.0, 4.0]), backend=backend)
    b = Vector.from_numpy(np.array([1.0, 2.0, 3.0, 4.0]), backend=backend)
    a.multiply(b)
    print_vector(a)
    a.release()
    b.release()

    # 3. Subvector view
    with Vector.from_numpy(np.array([10.0, 20.0, 30.0, 40.0, 50.0]), backend=backend) as v:
        print_vector(v.subvector(1, 3))

    # 4. Timing
    with allocate(size, dtype=np.float32, backend=backend) as big:
        big.fill(1.0)
        result = profile(lambda: big.scale(1.0001), backend)
        gbps = 2 * big.size * big.dtype.itemsize / (result.total_ms / 1000) / 1e9
        print(f"scale({size}): {result.total_ms:.3f} ms ({gbps:.1f} GB/s)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Vector runtime demo")
    parser.add_argument("--backend", choices=["cuda", "host"], default=None)
    parser.add_argument("--size", type=int, default=1 << 20)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    run_demo(args.backend, args.size)
