"""Vector: a 1-D, uniform-stride container over device memory.

Two handle kinds share one interface:

    - OwnedVector: produced by allocate()/allocate_zeroed()/from_numpy().
      Owns its allocation and must be released exactly once (release(),
      or use it as a context manager).
    - Vector: a non-owning view produced by subvector(). It has no
      release() and must not outlive the vector it was sliced from.

Every element operation writes through the view's (offset, stride) into
the backing allocation; nothing reallocates. Using a vector after its
memory was released raises OwnershipError.
"""

from __future__ import annotations

import logging

import numpy as np

from vector_runtime.backend import Backend
from vector_runtime.device import get_backend
from vector_runtime.dtypes import resolve_dtype, zero_of
from vector_runtime.errors import (
    AllocationError,
    OwnershipError,
    SizeMismatchError,
    StrideError,
    TransferError,
)
from vector_runtime.view import StridedView

logger = logging.getLogger(__name__)


class Vector:
    """Non-owning strided vector handle."""

    def __init__(self, view: StridedView, backend: Backend):
        self._view = view
        self._backend = backend

    @property
    def size(self) -> int:
        return self._view.size

    @property
    def stride(self) -> int:
        return self._view.stride

    @property
    def offset(self) -> int:
        """Element offset of element 0 inside the backing allocation."""
        return self._view.offset

    @property
    def dtype(self) -> np.dtype:
        return self._view.allocation.dtype

    @property
    def address(self) -> int:
        """Device address of element 0."""
        return self._view.address

    @property
    def view(self) -> StridedView:
        return self._view

    @property
    def backend(self) -> Backend:
        return self._backend

    @property
    def owns_memory(self) -> bool:
        return False

    @property
    def released(self) -> bool:
        return self._view.allocation.released

    def __len__(self) -> int:
        return self._view.size

    def __repr__(self) -> str:
        state = " released" if self.released else ""
        return (
            f"{type(self).__name__}(size={self.size}, stride={self.stride}, "
            f"dtype={self.dtype}, backend={self._backend.name}{state})"
        )

    def _live(self) -> StridedView:
        self._view.check_live()
        return self._view

    def _check_operand(self, op: str, other: Vector) -> StridedView:
        if not isinstance(other, Vector):
            raise TypeError(f"{op}: operand must be a Vector, got {type(other).__name__}")
        if other._backend is not self._backend:
            raise ValueError(f"{op}: vectors belong to different backends")
        if other.dtype != self.dtype:
            raise TypeError(f"{op}: element types differ ({self.dtype} vs {other.dtype})")
        if other.size != self.size:
            raise SizeMismatchError(op, self.size, other.size)
        return other._live()

    # ── slicing ──

    def subvector(self, offset: int, n: int) -> Vector:
        """Non-owning view of logical elements offset..offset+n-1.

        The view keeps this vector's stride and must not outlive it.
        """
        return Vector(self._live().subview(offset, n), self._backend)

    # ── elementwise kernels ──

    def fill(self, value) -> None:
        """Write value into every strided element."""
        self._backend.fill(self._live(), value)

    def scale(self, x) -> None:
        """self[i] *= x"""
        self._backend.scale(self._live(), x)

    def add_constant(self, x) -> None:
        """self[i] += x"""
        self._backend.add_constant(self._live(), x)

    def multiply(self, other: Vector) -> None:
        """self[i] *= other[i]; sizes must match, strides may differ."""
        b = self._check_operand("multiply", other)
        self._backend.multiply(self._live(), b)

    def divide(self, other: Vector) -> None:
        """self[i] /= other[i]; division by zero follows the element type's semantics."""
        b = self._check_operand("divide", other)
        self._backend.divide(self._live(), b)

    # ── transfers ──

    def to_numpy(self) -> np.ndarray:
        """Download the logical elements (honouring stride) to a new host array."""
        return self._backend.download(self._live())

    def copy_from(self, src) -> None:
        """Copy self.size elements from a Vector or host array into this vector."""
        copy(self, src)

    def copy_to(self, host: np.ndarray) -> None:
        """Copy this vector's elements into the first self.size slots of host."""
        copy(host, self)

    @staticmethod
    def from_numpy(data, dtype=None, backend: Backend | None = None) -> OwnedVector:
        """Allocate a vector and upload a 1-D host array into it.

        The element type defaults to that of data.
        """
        host = np.asarray(data)
        if host.ndim != 1:
            raise ValueError(f"from_numpy expects a 1-D array, got shape {host.shape}")
        vec = allocate(host.shape[0], dtype=host.dtype if dtype is None else dtype, backend=backend)
        try:
            copy(vec, host)
        except TransferError:
            vec.release()
            raise
        return vec


class OwnedVector(Vector):
    """Vector that owns its allocation and must be released exactly once."""

    @property
    def owns_memory(self) -> bool:
        return True

    def release(self) -> None:
        """Free the backing memory; views sliced from this vector become invalid."""
        if self._view.allocation.released:
            raise OwnershipError("vector memory has already been released")
        self._backend.release(self._view.allocation)

    def __enter__(self) -> OwnedVector:
        return self

    def __exit__(self, exc_type, exc, tb):
        if not self.released:
            self.release()
        return False


# ── lifecycle ──


def allocate(n: int, dtype=np.float64, backend: Backend | None = None) -> OwnedVector:
    """Reserve device memory for n elements (stride 1, uninitialized contents).

    Raises:
        AllocationError: invalid size or element type, or the device is out of memory.
    """
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 0:
        raise AllocationError(f"Invalid vector size: {n!r}")
    try:
        resolved = resolve_dtype(dtype)
    except TypeError as e:
        raise AllocationError(str(e)) from e
    backend = backend or get_backend()
    allocation = backend.allocate(int(n), resolved)
    return OwnedVector(StridedView(allocation, 0, 1, int(n)), backend)


def allocate_zeroed(n: int, dtype=np.float64, backend: Backend | None = None) -> OwnedVector:
    """allocate() followed by filling every element with zero."""
    vec = allocate(n, dtype=dtype, backend=backend)
    vec.fill(zero_of(vec.dtype))
    return vec


def release(vector: Vector) -> None:
    """Free an owning vector's memory. Views cannot be released."""
    if not isinstance(vector, OwnedVector):
        raise OwnershipError("cannot release a non-owning vector view")
    vector.release()


def subvector(vector: Vector, offset: int, n: int) -> Vector:
    return vector.subvector(offset, n)


# ── transfer ──


def _require_unit_stride(vector: Vector, role: str) -> None:
    if vector.stride != 1:
        raise StrideError(f"copy requires a unit-stride {role}, got stride {vector.stride}")


def copy(dst, src) -> None:
    """Copy elements between vectors and host arrays.

    Directions:
        Vector <- Vector:  dst.size elements from src.
        Vector <- host:    dst.size elements from a host array (cast to dst.dtype).
        host <- Vector:    src.size elements into a writable numpy array.

    Device operands must have unit stride. Capacity and type problems are
    detected before anything is written.

    Raises:
        StrideError: a device operand has stride != 1.
        TransferError: too few source elements, too little destination room,
            incompatible operands, or a device-level copy failure.
    """
    if isinstance(dst, Vector) and isinstance(src, Vector):
        _copy_device_to_device(dst, src)
    elif isinstance(dst, Vector):
        _copy_host_to_device(dst, src)
    elif isinstance(src, Vector):
        _copy_device_to_host(dst, src)
    else:
        raise TypeError("copy needs at least one Vector operand")


def _copy_device_to_device(dst: Vector, src: Vector) -> None:
    _require_unit_stride(dst, "destination")
    _require_unit_stride(src, "source")
    dst_view, src_view = dst._live(), src._live()
    if src.backend is not dst.backend:
        raise TransferError("device to device copy between different backends")
    if src.dtype != dst.dtype:
        raise TransferError(f"device to device copy between {src.dtype} and {dst.dtype}")
    if src.size < dst.size:
        logger.warning("Device copy short read: source %d < destination %d", src.size, dst.size)
        raise TransferError(f"source holds {src.size} elements, destination needs {dst.size}")
    dst.backend.copy_device(dst_view, src_view)


def _copy_host_to_device(dst: Vector, src) -> None:
    _require_unit_stride(dst, "destination")
    view = dst._live()
    try:
        host = np.asarray(src).reshape(-1).astype(dst.dtype, copy=False)
    except (TypeError, ValueError) as e:
        raise TransferError(f"host data cannot be converted to {dst.dtype}: {e}") from e
    if host.shape[0] < dst.size:
        logger.warning("Host to device short read: source %d < destination %d", host.shape[0], dst.size)
        raise TransferError(f"host buffer holds {host.shape[0]} elements, destination needs {dst.size}")
    dst.backend.upload(view, host)


def _copy_device_to_host(dst, src: Vector) -> None:
    _require_unit_stride(src, "source")
    view = src._live()
    if not isinstance(dst, np.ndarray) or dst.ndim != 1:
        raise TransferError("device to host copy needs a 1-D numpy array destination")
    if not dst.flags.writeable:
        raise TransferError("device to host destination is read-only")
    if dst.shape[0] < src.size:
        logger.warning("Device to host overflow: destination %d < source %d", dst.shape[0], src.size)
        raise TransferError(f"host buffer holds {dst.shape[0]} elements, source has {src.size}")
    data = src.backend.download(view)
    try:
        dst[:src.size] = data
    except (TypeError, ValueError) as e:
        raise TransferError(f"cannot store {src.dtype} elements into {dst.dtype} buffer: {e}") from e


# ── elementwise (module-level aliases of the Vector methods) ──


def fill(vector: Vector, value) -> None:
    vector.fill(value)


def scale(vector: Vector, x) -> None:
    vector.scale(x)


def add_constant(vector: Vector, x) -> None:
    vector.add_constant(x)


def multiply(a: Vector, b: Vector) -> None:
    a.multiply(b)


def divide(a: Vector, b: Vector) -> None:
    a.divide(b)
