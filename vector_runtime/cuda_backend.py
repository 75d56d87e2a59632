"""CUDA backend: CuPy-based vector storage and kernels.

Allocations are 1-D cupy.ndarray objects drawn from CuPy's memory pool.
Strided views are cupy slices of them, so kernels write straight through
to the owning allocation. All work is issued on CuPy's current stream and
therefore runs in program order; download() synchronizes.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any

import numpy as np

from vector_runtime.backend import Backend, DeviceAllocation
from vector_runtime.cuda_templates import (
    CTYPES,
    ELEMENTWISE_OPS,
    fill_kernel_name,
    fill_kernel_source,
)
from vector_runtime.errors import AllocationError, TransferError
from vector_runtime.launch_config import DEFAULT_LAUNCH, LaunchConfig, grid_size
from vector_runtime.view import StridedView

try:
    import cupy as cp

    HAS_CUPY = True
except ImportError:
    cp = None
    HAS_CUPY = False

logger = logging.getLogger(__name__)

# Module-level NVRTC compilation cache: source_hash -> RawKernel
_KERNEL_CACHE: dict[str, "cp.RawKernel"] = {}
_ELEMENTWISE_CACHE: dict[str, "cp.ElementwiseKernel"] = {}


def _get_or_compile_kernel(source_code: str, kernel_name: str) -> "cp.RawKernel":
    """Get a compiled kernel from cache or compile via NVRTC."""
    key = hashlib.md5(source_code.encode()).hexdigest() + ":" + kernel_name
    cached = _KERNEL_CACHE.get(key)
    if cached is not None:
        return cached
    logger.debug("Compiling %s", kernel_name)
    kernel = cp.RawKernel(source_code, kernel_name)
    _KERNEL_CACHE[key] = kernel
    return kernel


def _get_elementwise(op: str) -> "cp.ElementwiseKernel":
    cached = _ELEMENTWISE_CACHE.get(op)
    if cached is not None:
        return cached
    in_params, out_params, operation = ELEMENTWISE_OPS[op]
    kernel = cp.ElementwiseKernel(in_params, out_params, operation, f"vector_{op}")
    _ELEMENTWISE_CACHE[op] = kernel
    return kernel


def _transfer_errors() -> tuple[type[BaseException], ...]:
    return (cp.cuda.runtime.CUDARuntimeError, cp.cuda.memory.OutOfMemoryError, ValueError, TypeError)


class CUDAAllocation(DeviceAllocation):
    """CUDA allocation backed by a 1-D cupy.ndarray."""

    def __init__(self, data: cp.ndarray):
        self._data = data
        self._dtype = data.dtype
        self._size = data.shape[0]
        self._address = data.data.ptr

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
    def native_handle(self) -> Any:
        """Return the underlying cupy.ndarray."""
        return self._data

    @property
    def released(self) -> bool:
        return self._data is None

    def _free(self):
        # Dropping the last reference returns the block to CuPy's memory pool
        self._data = None


def _elements(view: StridedView) -> cp.ndarray:
    return view.allocation.native_handle[view.as_slice()]


class CUDABackend(Backend):
    """CUDA GPU vector backend using CuPy."""

    def __init__(self, device_id: int = 0, config: LaunchConfig | None = None):
        if not HAS_CUPY:
            raise RuntimeError("CuPy is not installed. Install with: pip install -e .[cuda]")
        self._device_id = device_id
        self._cp_device = cp.cuda.Device(device_id)
        self._config = config or DEFAULT_LAUNCH

    @property
    def name(self) -> str:
        return "cuda"

    @property
    def device(self) -> Any:
        """Return CuPy device object."""
        return self._cp_device

    @property
    def config(self) -> LaunchConfig:
        return self._config

    def allocate(self, n: int, dtype: np.dtype) -> CUDAAllocation:
        if dtype not in CTYPES:
            raise AllocationError(f"Element type {dtype} is not supported on CUDA")
        try:
            with self._cp_device:
                data = cp.empty(n, dtype=dtype)
        except (cp.cuda.memory.OutOfMemoryError, cp.cuda.runtime.CUDARuntimeError, ValueError) as e:
            logger.warning("CUDA allocation of %d x %s failed: %s", n, dtype, e)
            raise AllocationError(f"Failed to allocate {n} elements of {dtype} on CUDA device {self._device_id}") from e
        logger.debug("Allocated %d x %s on CUDA device %d", n, dtype, self._device_id)
        return CUDAAllocation(data)

    def release(self, allocation: CUDAAllocation) -> None:
        logger.debug("Released %d bytes on CUDA device %d", allocation.size_bytes, self._device_id)
        allocation._free()

    def fill(self, view: StridedView, value) -> None:
        if view.size == 0:
            return
        dtype = view.allocation.dtype
        kernel = _get_or_compile_kernel(fill_kernel_source(dtype), fill_kernel_name(dtype))
        block = self._config.block_size
        grid = grid_size(view.size, self._config)
        # A cupy slice passed as a kernel argument is the pointer to its element 0
        data = view.allocation.native_handle[view.offset:]
        with self._cp_device:
            kernel((grid,), (block,), (data, np.int64(view.stride), np.int64(view.size), dtype.type(value)))

    def _map(self, op: str, a: StridedView, operand) -> None:
        if a.size == 0:
            return
        dst = _elements(a)
        with self._cp_device:
            _get_elementwise(op)(dst, operand, dst)

    def scale(self, view: StridedView, x) -> None:
        self._map("scale", view, view.allocation.dtype.type(x))

    def add_constant(self, view: StridedView, x) -> None:
        self._map("add_constant", view, view.allocation.dtype.type(x))

    def multiply(self, a: StridedView, b: StridedView) -> None:
        self._map("multiply", a, _elements(b))

    def divide(self, a: StridedView, b: StridedView) -> None:
        self._map("divide", a, _elements(b))

    def copy_device(self, dst: StridedView, src: StridedView) -> None:
        n = dst.size
        try:
            with self._cp_device:
                dst.allocation.native_handle[dst.offset:dst.offset + n] = (
                    src.allocation.native_handle[src.offset:src.offset + n]
                )
        except _transfer_errors() as e:
            raise TransferError(f"Device to device copy of {n} elements failed: {e}") from e

    def upload(self, dst: StridedView, host: np.ndarray) -> None:
        n = dst.size
        if n == 0:
            return
        try:
            with self._cp_device:
                dst.allocation.native_handle[dst.offset:dst.offset + n].set(np.ascontiguousarray(host[:n]))
        except _transfer_errors() as e:
            raise TransferError(f"Host to device copy of {n} elements failed: {e}") from e

    def download(self, src: StridedView) -> np.ndarray:
        try:
            with self._cp_device:
                return cp.asnumpy(_elements(src))
        except _transfer_errors() as e:
            raise TransferError(f"Device to host copy of {src.size} elements failed: {e}") from e

    def synchronize(self):
        """Synchronize CUDA device."""
        cp.cuda.Device(self._device_id).synchronize()
