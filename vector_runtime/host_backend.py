"""Host backend: numpy-simulated device memory.

Runs every vector operation on the CPU so the library (and its tests)
work where no CUDA device is present. Allocations are plain 1-D numpy
arrays; views are numpy strided slices, so writes go through to the
backing allocation exactly as device kernels would.
"""

from __future__ import annotations

import logging

import numpy as np

from vector_runtime.backend import Backend, DeviceAllocation
from vector_runtime.dtypes import is_integer
from vector_runtime.errors import AllocationError
from vector_runtime.launch_config import DEFAULT_LAUNCH, LaunchConfig, grid_stride_ranges
from vector_runtime.view import StridedView

logger = logging.getLogger(__name__)


class HostAllocation(DeviceAllocation):
    """Host memory allocation backed by a 1-D numpy.ndarray."""

    def __init__(self, data: np.ndarray):
        self._data = data
        self._dtype = data.dtype
        self._size = data.shape[0]
        self._address = data.ctypes.data

    @property
    def size(self) -> int:
        return self._size

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def address(self) -> int:
        return self._address

    @property
    def native_handle(self) -> np.ndarray:
        return self._data

    @property
    def released(self) -> bool:
        return self._data is None

    def _free(self):
        self._data = None


def _elements(view: StridedView) -> np.ndarray:
    """Writable numpy view over the logical elements."""
    return view.allocation.native_handle[view.as_slice()]


def _truncating_divide(a: np.ndarray, b: np.ndarray) -> None:
    """In-place integer a /= b rounding toward zero, as C integer division does."""
    quotient = a // b
    inexact = (a % b) != 0
    negative = (a < 0) != (b < 0)
    quotient += (inexact & negative).astype(quotient.dtype)
    a[...] = quotient


class HostBackend(Backend):
    """Vector backend executing on the CPU with numpy."""

    def __init__(self, config: LaunchConfig | None = None):
        self._config = config or DEFAULT_LAUNCH

    @property
    def name(self) -> str:
        return "host"

    @property
    def config(self) -> LaunchConfig:
        return self._config

    def allocate(self, n: int, dtype: np.dtype) -> HostAllocation:
        try:
            data = np.empty(n, dtype=dtype)
        except (MemoryError, ValueError) as e:
            logger.warning("Host allocation of %d x %s failed: %s", n, dtype, e)
            raise AllocationError(f"Failed to allocate {n} elements of {dtype}") from e
        logger.debug("Allocated %d x %s on host", n, dtype)
        return HostAllocation(data)

    def release(self, allocation: HostAllocation) -> None:
        logger.debug("Released %d bytes on host", allocation.size_bytes)
        allocation._free()

    def fill(self, view: StridedView, value) -> None:
        """Grid-stride fill: each emulated worker writes every workers-th element."""
        if view.size == 0:
            return
        value = view.allocation.dtype.type(value)
        base = view.allocation.native_handle
        workers = self._config.host_workers
        step = workers * view.stride
        for indices in grid_stride_ranges(view.size, workers):
            start = view.offset + indices.start * view.stride
            base[start:view.end:step] = value

    def scale(self, view: StridedView, x) -> None:
        a = _elements(view)
        a *= view.allocation.dtype.type(x)

    def add_constant(self, view: StridedView, x) -> None:
        a = _elements(view)
        a += view.allocation.dtype.type(x)

    def multiply(self, a: StridedView, b: StridedView) -> None:
        dst = _elements(a)
        dst *= _elements(b)

    def divide(self, a: StridedView, b: StridedView) -> None:
        dst = _elements(a)
        src = _elements(b)
        with np.errstate(divide="ignore", invalid="ignore"):
            if is_integer(dst.dtype):
                _truncating_divide(dst, src)
            else:
                dst /= src

    def copy_device(self, dst: StridedView, src: StridedView) -> None:
        n = dst.size
        base = dst.allocation.native_handle
        base[dst.offset:dst.offset + n] = src.allocation.native_handle[src.offset:src.offset + n]

    def upload(self, dst: StridedView, host: np.ndarray) -> None:
        n = dst.size
        dst.allocation.native_handle[dst.offset:dst.offset + n] = host[:n]

    def download(self, src: StridedView) -> np.ndarray:
        return _elements(src).copy()

    def synchronize(self):
        pass  # numpy operations complete before returning
